"""scripts.validate_catalog

Validates a query-template catalog file without matching anything.

Usage:
  python scripts/validate_catalog.py --catalog data/query_templates.json
"""

from __future__ import annotations

import argparse

from kbqa.env_loader import load_env
from kbqa.catalog.registry import FileCatalogSource


def main() -> int:
    load_env()  # load .env if present
    ap = argparse.ArgumentParser()
    ap.add_argument("--catalog", required=True)
    args = ap.parse_args()
    result = FileCatalogSource(args.catalog).load()
    if not result.ok:
        print(f"FAILED: {result.error}")
        return 1
    print(f"OK ({len(result.catalog)} templates)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
