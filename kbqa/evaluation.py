"""kbqa.evaluation

Runs a set of analyzed questions through the ranking aggregator and tabulates the outcome.

Question files are JSON Lines, one object per question:
  {"id": "q1", "text": "...", "tokens": [{"text": ..., "pos": ..., "kind": ..., "uri": ...}, ...],
   "expected_template": "capital_of"}   # expected_template is optional
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pandas as pd

from kbqa.main import coerce_tokens
from kbqa.matching.ranking import RankingAggregator
from kbqa.paths import default_questions_path

RESULT_COLUMNS = [
    "id", "text", "start_word", "superlative", "representation", "matches",
    "best_template", "best_score", "best_key", "best_query", "expected_template", "hit",
]


def load_questions(path: Optional[str] = None) -> list[dict[str, Any]]:
    p = Path(path) if path else default_questions_path()
    df = pd.read_json(p, lines=True, dtype=False)
    return df.to_dict(orient="records")


def _missing(value: Any) -> bool:
    # pandas fills keys absent from a JSON Lines row with NaN
    return value is None or (isinstance(value, float) and pd.isna(value))


def _text_field(q: dict[str, Any], name: str) -> Optional[str]:
    value = q.get(name)
    return None if _missing(value) else str(value)


def question_tokens(q: dict[str, Any]) -> list[Any]:
    tokens = q.get("tokens")
    return tokens if isinstance(tokens, list) else []


def evaluate_questions(aggregator: RankingAggregator, questions: list[dict[str, Any]]) -> pd.DataFrame:
    rows: list[dict[str, Any]] = []
    for q in questions:
        ranked = aggregator.match(coerce_tokens(question_tokens(q)))
        props = ranked.properties
        best = ranked.best()
        expected = _text_field(q, "expected_template")
        rows.append({
            "id": _text_field(q, "id") or "",
            "text": _text_field(q, "text") or "",
            "start_word": props.start_word if props else "",
            "superlative": props.superlative if props else False,
            "representation": props.representation if props else "",
            "matches": len(ranked),
            "best_template": best.template.id if best else None,
            "best_score": best.score if best else None,
            "best_key": best.key if best else None,
            "best_query": best.candidates[0].query if best else None,
            "expected_template": expected,
            "hit": (best is not None and best.template.id == expected) if expected else None,
        })
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def summarize(df: pd.DataFrame) -> dict[str, Any]:
    labelled = df[df["expected_template"].notna()]
    hits = sum(1 for h in labelled["hit"] if not pd.isna(h) and bool(h))
    return {
        "questions": int(len(df)),
        "answered": int((df["matches"] > 0).sum()) if not df.empty else 0,
        "labelled": int(len(labelled)),
        "hits": hits,
        "accuracy": (hits / len(labelled)) if len(labelled) else None,
    }
