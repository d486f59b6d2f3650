"""kbqa.matching.ranking

Runs the TemplateMatcher across the whole catalog and collects accepted templates into a
best-first result.

Ranking key = raw score + position * TIE_BREAK_STEP, where position is the template's 1-based
place in catalog order (counted whether or not the template is accepted). Equal raw scores
therefore get distinct keys and the later template ranks first, e.g. two templates at 0.70
in positions 1 and 2 get 0.701 and 0.702.

With ranking_order="stable" entries are ordered by raw score, then by catalog position
(earlier first); the perturbed keys are still reported but no longer decide the order, so
iterating the result can yield a smaller key before a larger one.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Iterator, Optional, Sequence, Union

from kbqa.catalog.registry import CatalogHolder, TemplateCatalog
from kbqa.config import RANKING_ORDERS
from kbqa.contracts.collaborators import ParameterSubstitutor, QuestionAnalyzer
from kbqa.contracts.models import BoundQuery, QuestionProperties, RankedEntry, Token
from kbqa.errors import ConfigError
from kbqa.logging_utils import engine_logger
from kbqa.matching.matcher import TemplateMatcher
from kbqa.tracing import TraceCollector, trace

TIE_BREAK_STEP = 0.001


class RankedCandidates(Mapping):
    """Read-only mapping key -> bound queries, iterated best match first.

    Iteration follows `entries`. In "offset" order that is descending key; in "stable" order it
    is score then catalog position, so keys need not descend. Use `best()` rather than max(keys).
    """

    def __init__(self, entries: Sequence[RankedEntry] = (), properties: Optional[QuestionProperties] = None):
        self.entries: tuple[RankedEntry, ...] = tuple(entries)
        self.properties = properties
        self._by_key = {e.key: list(e.candidates) for e in self.entries}

    def __getitem__(self, key: float) -> list[BoundQuery]:
        return self._by_key[key]

    def __iter__(self) -> Iterator[float]:
        return (e.key for e in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        inner = ", ".join(f"{e.key:.4f}: {e.template.id}" for e in self.entries)
        return f"RankedCandidates({{{inner}}})"

    def best(self) -> Optional[RankedEntry]:
        return self.entries[0] if self.entries else None


def _unique_key(key: float, taken: set[float]) -> float:
    # score + offset can still round onto an existing key
    while key in taken:
        key = math.nextafter(key, math.inf)
    return key


class RankingAggregator:
    """Matches a question against every template of the catalog.

    Holds no per-call state; the catalog is read once per call as an immutable snapshot.
    """

    def __init__(
        self,
        catalog: Union[TemplateCatalog, CatalogHolder],
        analyzer: QuestionAnalyzer,
        matcher: TemplateMatcher,
        substitutor: ParameterSubstitutor,
        ranking_order: str = "offset",
        logger: Optional[logging.Logger] = None,
    ):
        if ranking_order not in RANKING_ORDERS:
            raise ConfigError(f"Unknown ranking order '{ranking_order}', expected one of {RANKING_ORDERS}")
        self.catalog = catalog
        self.analyzer = analyzer
        self.matcher = matcher
        self.substitutor = substitutor
        self.ranking_order = ranking_order
        self.logger = logger or engine_logger("ranking")

    def snapshot(self) -> TemplateCatalog:
        if isinstance(self.catalog, CatalogHolder):
            return self.catalog.current()
        return self.catalog

    def match(self, tokens: Sequence[Token], tracer: Optional[TraceCollector] = None) -> RankedCandidates:
        props = self.analyzer.analyze(tokens)
        catalog = self.snapshot()
        self.logger.info("%s", props)
        trace(tracer, "question_properties", {
            "start_word": props.start_word,
            "superlative": props.superlative,
            "representation": props.representation,
            "resource_count": props.resource_count,
            "ontology_count": props.ontology_count,
        })

        entries: list[RankedEntry] = []
        taken: set[float] = set()
        for position, tmpl in enumerate(catalog, start=1):
            offset = position * TIE_BREAK_STEP
            result = self.matcher.evaluate(props, tmpl, tracer)
            if result is None:
                continue

            candidates = self.substitutor.bind(tokens, result.example, tmpl) or []
            trace(tracer, "bindings", {"template": tmpl.id, "count": len(candidates)})
            if not candidates:
                continue

            key = _unique_key(result.score + offset, taken)
            taken.add(key)
            entries.append(RankedEntry(
                key=key, score=result.score, position=position, template=tmpl, candidates=tuple(candidates),
            ))

        if self.ranking_order == "stable":
            entries.sort(key=lambda e: (-e.score, e.position))
        else:
            entries.sort(key=lambda e: e.key, reverse=True)

        self.logger.debug("Query template amount: %d", len(entries))
        trace(tracer, "ranking", {
            "order": self.ranking_order,
            "ranked": [{"template": e.template.id, "key": e.key, "score": e.score} for e in entries],
        })
        return RankedCandidates(entries, properties=props)
