"""kbqa.main

Wiring for catalog + analyzer + matcher + substitutor + ranking aggregator.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from kbqa.env_loader import load_env
from kbqa.config import Settings
from kbqa.logging_utils import build_logger
from kbqa.tracing import TraceCollector

from kbqa.catalog.registry import CatalogHolder, FileCatalogSource
from kbqa.analysis.question_analyzer import DefaultQuestionAnalyzer
from kbqa.contracts.models import Token
from kbqa.matching.filters import COUNT_FILTERS
from kbqa.matching.matcher import TemplateMatcher
from kbqa.matching.ranking import RankedCandidates, RankingAggregator
from kbqa.matching.similarity import build_similarity
from kbqa.substitution.parameter_substitutor import DefaultParameterSubstitutor


def build_aggregator(settings: Optional[Settings] = None, catalog_path: Optional[str] = None) -> RankingAggregator:
    if settings is None:
        load_env()  # load .env if present
        settings = Settings.load()
    logger = build_logger(settings.log_dir)

    holder = CatalogHolder(FileCatalogSource(catalog_path or settings.catalog_path, logger=logger.getChild("catalog")))
    if not holder.last_result.ok:
        logger.warning("Matching against an empty catalog: %s", holder.last_result.error)

    matcher = TemplateMatcher(
        similarity=build_similarity(settings.similarity_metric),
        extra_filters=COUNT_FILTERS if settings.enable_count_filters else (),
        logger=logger.getChild("matcher"),
    )
    return RankingAggregator(
        catalog=holder,
        analyzer=DefaultQuestionAnalyzer(),
        matcher=matcher,
        substitutor=DefaultParameterSubstitutor(settings.max_bindings, logger=logger.getChild("substitution")),
        ranking_order=settings.ranking_order,
        logger=logger.getChild("ranking"),
    )


def coerce_tokens(raw: Sequence[Any]) -> list[Token]:
    """Accept Token objects or their JSON dict form."""
    return [t if isinstance(t, Token) else Token.from_dict(t) for t in raw]


def match_question(
    tokens: Sequence[Any],
    aggregator: Optional[RankingAggregator] = None,
    tracer: Optional[TraceCollector] = None,
) -> RankedCandidates:
    agg = aggregator or build_aggregator()
    return agg.match(coerce_tokens(tokens), tracer=tracer)
