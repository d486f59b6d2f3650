"""kbqa.contracts.collaborators

Interfaces for the collaborators the matching core depends on.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Sequence

from .models import BoundQuery, QueryTemplate, QuestionProperties, Token


class QuestionAnalyzer(ABC):
    @abstractmethod
    def analyze(self, tokens: Sequence[Token]) -> QuestionProperties:
        raise NotImplementedError


class SimilarityMetric(ABC):
    name: str

    @abstractmethod
    def score(self, a: str, b: str) -> float:
        """Return a similarity in [0, 1]. Must be pure and total."""
        raise NotImplementedError

    def __call__(self, a: str, b: str) -> float:
        return self.score(a, b)


class ParameterSubstitutor(ABC):
    @abstractmethod
    def bind(self, tokens: Sequence[Token], example: str, template: QueryTemplate) -> list[BoundQuery]:
        """Return every fully bound query; an empty list means no valid binding."""
        raise NotImplementedError
