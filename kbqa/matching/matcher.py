"""kbqa.matching.matcher

Decides whether one query template applies to a question and how well.

Stages, short-circuiting:
  1. categorical filters (start word, superlative, then any extra filters)
  2. fuzzy scoring of every example phrasing against the representation form
  3. threshold gate at QUERY_RANKING_THRESHOLD
"""

from __future__ import annotations
import logging
from typing import Optional

from kbqa.contracts.collaborators import SimilarityMetric
from kbqa.contracts.models import MatchResult, QueryTemplate, QuestionProperties
from kbqa.logging_utils import engine_logger
from kbqa.matching.filters import DEFAULT_FILTERS, TemplateFilter, first_rejection
from kbqa.tracing import TraceCollector, trace

QUERY_RANKING_THRESHOLD = 0.5


def best_example(similarity: SimilarityMetric, examples: tuple[str, ...], representation: str) -> tuple[str, float]:
    """Return the first example reaching the highest score, and that score."""
    best, best_score = "", 0.0
    for example in examples:
        s = similarity(example, representation)
        if s > best_score:
            best, best_score = example, s
    return best, best_score


class TemplateMatcher:
    """Stateless evaluator; safe to share between concurrent callers."""

    def __init__(
        self,
        similarity: SimilarityMetric,
        extra_filters: tuple[TemplateFilter, ...] = (),
        logger: Optional[logging.Logger] = None,
    ):
        self.similarity = similarity
        self.filters = DEFAULT_FILTERS + tuple(extra_filters)
        self.logger = logger or engine_logger("matcher")

    def evaluate(
        self,
        props: QuestionProperties,
        tmpl: QueryTemplate,
        tracer: Optional[TraceCollector] = None,
    ) -> Optional[MatchResult]:
        reason = first_rejection(self.filters, props, tmpl)
        if reason is not None:
            self.logger.debug("Template %s rejected: %s", tmpl.id, reason)
            trace(tracer, "template_rejected", {"template": tmpl.id, "reason": reason})
            return None

        example, score = best_example(self.similarity, tmpl.examples, props.representation)
        if score < QUERY_RANKING_THRESHOLD:
            self.logger.debug("Template %s similarity too low: %.4f", tmpl.id, score)
            trace(tracer, "template_rejected", {
                "template": tmpl.id, "reason": "similarity_below_threshold", "score": score,
            })
            return None

        self.logger.debug("Template %s accepted: '%s' ~ '%s' = %.4f", tmpl.id, example, props.representation, score)
        trace(tracer, "template_accepted", {"template": tmpl.id, "example": example, "score": score})
        return MatchResult(example=example, score=score)
