"""kbqa.analysis.question_analyzer

Derives QuestionProperties (start word, superlative flag, representation form) from the
analyzed tokens of a question.

The representation form is the string compared against template example phrasings: words are
kept verbatim, punctuation is dropped and every resource mention is replaced by RESOURCE_MARKER,
so "What is the capital of France ?" becomes "What is the capital of X".
"""

from __future__ import annotations

from typing import Sequence

from kbqa.contracts.collaborators import QuestionAnalyzer
from kbqa.contracts.models import QuestionProperties, Token

RESOURCE_MARKER = "X"

_SUPERLATIVE_TAGS = {"JJS", "RBS"}
_SUPERLATIVE_WORDS = {"most", "least"}
_PUNCT = {"?", ".", "!", ","}

# "How" only counts as a start word together with its quantifier
_HOW_QUALIFIERS = {"many", "much", "often", "long", "old", "big", "tall", "large", "far"}


def _is_punct(tok: Token) -> bool:
    return tok.pos == "." or tok.text in _PUNCT


def _is_superlative(tok: Token) -> bool:
    if tok.pos in _SUPERLATIVE_TAGS:
        return True
    return (tok.lemma or tok.text).lower() in _SUPERLATIVE_WORDS


def _distinct_uris(tokens: Sequence[Token], kind: str) -> int:
    return len({t.uri for t in tokens if t.kind == kind and t.uri})


class DefaultQuestionAnalyzer(QuestionAnalyzer):
    """Pure, deterministic analyzer over well-formed token sequences."""

    def analyze(self, tokens: Sequence[Token]) -> QuestionProperties:
        words = [t for t in tokens if not _is_punct(t)]
        if not words:
            return QuestionProperties(start_word="", superlative=False, representation="")

        return QuestionProperties(
            start_word=self.start_word(words),
            superlative=any(_is_superlative(t) for t in words),
            representation=" ".join(RESOURCE_MARKER if t.kind == "resource" else t.text for t in words),
            resource_count=_distinct_uris(words, "resource"),
            ontology_count=_distinct_uris(words, "ontology"),
        )

    @staticmethod
    def start_word(words: Sequence[Token]) -> str:
        first = words[0].text
        if first.lower() == "how" and len(words) > 1 and words[1].text.lower() in _HOW_QUALIFIERS:
            return f"{first} {words[1].text}"
        return first
