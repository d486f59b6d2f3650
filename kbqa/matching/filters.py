"""kbqa.matching.filters

Categorical gates applied before fuzzy scoring.

A filter takes (properties, template) and returns a rejection reason, or None to let the
template through. The matcher runs its filters in order and stops at the first rejection.
"""

from __future__ import annotations
from typing import Callable, Optional

from kbqa.contracts.models import QueryTemplate, QuestionProperties

TemplateFilter = Callable[[QuestionProperties, QueryTemplate], Optional[str]]


def start_word_filter(props: QuestionProperties, tmpl: QueryTemplate) -> Optional[str]:
    # Exact, case-sensitive membership
    if props.start_word not in tmpl.start_words:
        return "wrong_start_word"
    return None


def superlative_filter(props: QuestionProperties, tmpl: QueryTemplate) -> Optional[str]:
    # Asymmetric: only templates that demand a superlative can reject
    if tmpl.superlative and not props.superlative:
        return "inconsistent_superlative"
    return None


def min_bound_entities_filter(props: QuestionProperties, tmpl: QueryTemplate) -> Optional[str]:
    if tmpl.min_bound_entities > props.resource_count:
        return "not_enough_resources"
    return None


def min_ontology_refs_filter(props: QuestionProperties, tmpl: QueryTemplate) -> Optional[str]:
    if tmpl.min_ontology_refs > props.ontology_count:
        return "not_enough_ontologies"
    return None


DEFAULT_FILTERS: tuple[TemplateFilter, ...] = (start_word_filter, superlative_filter)
# Legacy hints from the catalog schema; off unless KBQA_ENABLE_COUNT_FILTERS is set
COUNT_FILTERS: tuple[TemplateFilter, ...] = (min_bound_entities_filter, min_ontology_refs_filter)


def first_rejection(
    filters: tuple[TemplateFilter, ...], props: QuestionProperties, tmpl: QueryTemplate
) -> Optional[str]:
    for f in filters:
        reason = f(props, tmpl)
        if reason is not None:
            return reason
    return None
