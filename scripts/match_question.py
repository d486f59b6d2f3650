"""scripts.match_question

Match one analyzed question against the template catalog and print the ranked queries.

Usage:
  python scripts/match_question.py --tokens /path/to/tokens.json [--debug]
  python scripts/match_question.py --question-id q1 [--questions data/sample_questions.jsonl]
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from kbqa.env_loader import load_env
from kbqa.config import Settings
from kbqa.evaluation import load_questions, question_tokens
from kbqa.main import build_aggregator, match_question
from kbqa.tracing import TraceCollector


def _tokens_from_args(args: argparse.Namespace, settings: Settings) -> list[dict]:
    if args.tokens:
        obj = json.loads(Path(args.tokens).read_text(encoding="utf-8"))
        return obj.get("tokens", []) if isinstance(obj, dict) else obj
    for q in load_questions(args.questions or settings.questions_path):
        if str(q.get("id")) == args.question_id:
            return question_tokens(q)
    raise SystemExit(f"Question not found: {args.question_id}")


def main() -> int:
    load_env()  # load .env if present
    ap = argparse.ArgumentParser()
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--tokens", help="JSON file with a token list (or {'tokens': [...]})")
    src.add_argument("--question-id", help="Id of a question in the questions file")
    ap.add_argument("--questions", help="JSON Lines question file (default: KBQA_QUESTIONS_PATH)")
    ap.add_argument("--catalog", help="Template catalog (default: KBQA_CATALOG_PATH)")
    ap.add_argument("--debug", action="store_true", help="Print per-template traces")
    args = ap.parse_args()

    settings = Settings.load()
    tokens = _tokens_from_args(args, settings)
    aggregator = build_aggregator(settings, catalog_path=args.catalog)
    tracer = TraceCollector()
    ranked = match_question(tokens, aggregator=aggregator, tracer=tracer)

    if not ranked:
        print("No matching query template")
    for entry in ranked.entries:
        print(f"{entry.key:.4f}  {entry.template.id}  (score {entry.score:.4f}, position {entry.position})")
        for c in entry.candidates:
            print(f"    {c.query}")

    if args.debug:
        json.dump(tracer.traces, sys.stdout, indent=2, default=str)
        print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
