"""scripts.evaluate_questions

Runs every question of a JSON Lines file through the matcher and reports how many were answered
and how many picked the expected template.

Usage:
  python scripts/evaluate_questions.py [--questions data/sample_questions.jsonl] [--out report.csv]
"""

from __future__ import annotations

import argparse

from kbqa.env_loader import load_env
from kbqa.config import Settings
from kbqa.evaluation import evaluate_questions, load_questions, summarize
from kbqa.main import build_aggregator


def main() -> int:
    load_env()  # load .env if present
    ap = argparse.ArgumentParser()
    ap.add_argument("--questions", help="JSON Lines question file (default: KBQA_QUESTIONS_PATH)")
    ap.add_argument("--catalog", help="Template catalog (default: KBQA_CATALOG_PATH)")
    ap.add_argument("--out", help="Write the per-question table to this CSV file")
    args = ap.parse_args()

    settings = Settings.load()
    aggregator = build_aggregator(settings, catalog_path=args.catalog)
    df = evaluate_questions(aggregator, load_questions(args.questions or settings.questions_path))

    print(df[["id", "best_template", "best_score", "expected_template", "hit"]].to_string(index=False))
    for k, v in summarize(df).items():
        print(f"{k}: {v}")

    if args.out:
        df.to_csv(args.out, index=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
