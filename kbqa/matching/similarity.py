"""kbqa.matching.similarity

String similarity metrics used to compare example phrasings with a question's representation.
Both are case-insensitive and return a value in [0, 1].
"""

from __future__ import annotations
from difflib import SequenceMatcher

from rapidfuzz import fuzz

from kbqa.config import SIMILARITY_METRICS
from kbqa.contracts.collaborators import SimilarityMetric
from kbqa.errors import ConfigError


class SequenceSimilarity(SimilarityMetric):
    """difflib ratio (Ratcliff/Obershelp)."""
    name = "sequence"

    def score(self, a: str, b: str) -> float:
        return SequenceMatcher(None, a.lower(), b.lower()).ratio()


class LevenshteinSimilarity(SimilarityMetric):
    """Normalized InDel edit similarity from rapidfuzz."""
    name = "levenshtein"

    def score(self, a: str, b: str) -> float:
        return fuzz.ratio(a.lower(), b.lower()) / 100.0


def build_similarity(name: str) -> SimilarityMetric:
    if name == "sequence":
        return SequenceSimilarity()
    if name == "levenshtein":
        return LevenshteinSimilarity()
    raise ConfigError(f"Unknown similarity metric '{name}', expected one of {SIMILARITY_METRICS}")
