"""kbqa.contracts.models

Shared models for the catalog, analyzer, matcher, ranking aggregator and substitutor.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Literal, Optional

TokenKind = Literal["word", "resource", "ontology"]


@dataclass(frozen=True)
class Token:
    """One analyzed question token as produced by the upstream preprocessing pipeline."""
    text: str
    pos: str = ""  # Penn Treebank tag
    lemma: str = ""
    kind: TokenKind = "word"
    uri: Optional[str] = None

    @staticmethod
    def from_dict(obj: dict[str, Any]) -> "Token":
        return Token(
            text=str(obj.get("text", "")),
            pos=str(obj.get("pos") or ""),
            lemma=str(obj.get("lemma") or ""),
            kind=(obj.get("kind") or "word"),
            uri=obj.get("uri"),
        )


@dataclass(frozen=True)
class QueryTemplate:
    """Immutable catalog entry: allowed question shape, example phrasings and query bodies."""
    id: str
    start_words: frozenset[str]
    superlative: bool
    examples: tuple[str, ...]
    query_bodies: tuple[str, ...]
    # Schema-only hints; enforced only when the count filters are switched on
    min_bound_entities: int = 0
    min_ontology_refs: int = 0


@dataclass(frozen=True)
class QuestionProperties:
    """Properties derived once per matching call from the question tokens."""
    start_word: str
    superlative: bool
    representation: str
    resource_count: int = 0
    ontology_count: int = 0


@dataclass(frozen=True)
class MatchResult:
    """Best-fitting example phrasing of an accepted template and its similarity score."""
    example: str
    score: float


@dataclass(frozen=True)
class BoundQuery:
    """A query body with every placeholder resolved."""
    query: str
    body: str
    example: str
    bindings: dict[str, str] = field(default_factory=dict, hash=False)


@dataclass(frozen=True)
class RankedEntry:
    """One accepted template in a ranked result."""
    key: float
    score: float
    position: int  # 1-based catalog position
    template: QueryTemplate
    candidates: tuple[BoundQuery, ...]
