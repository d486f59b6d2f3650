"""kbqa.config

Centralized configuration for the matching engine.

Uses environment variables (optionally seeded from a .env file, see kbqa.env_loader).
"""

from __future__ import annotations
from dataclasses import dataclass
import os

from kbqa.paths import default_catalog_path, default_questions_path


SIMILARITY_METRICS = ("sequence", "levenshtein")
RANKING_ORDERS = ("offset", "stable")


def _env(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val is not None else default


def _env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None:
        return default
    try:
        return int(v)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Engine settings loaded from environment variables."""

    # Catalog + sample data
    catalog_path: str
    questions_path: str

    # Matching
    similarity_metric: str  # sequence|levenshtein
    ranking_order: str  # offset|stable
    enable_count_filters: bool
    max_bindings: int

    # UI defaults
    default_debug: bool

    # Logging
    log_dir: str

    @staticmethod
    def load() -> "Settings":
        return Settings(
            catalog_path=_env("KBQA_CATALOG_PATH", str(default_catalog_path())) or str(default_catalog_path()),
            questions_path=_env("KBQA_QUESTIONS_PATH", str(default_questions_path())) or str(default_questions_path()),
            similarity_metric=(_env("KBQA_SIMILARITY", "sequence") or "sequence").strip().lower(),
            ranking_order=(_env("KBQA_RANKING_ORDER", "offset") or "offset").strip().lower(),
            enable_count_filters=_env_bool("KBQA_ENABLE_COUNT_FILTERS", False),
            max_bindings=max(_env_int("KBQA_MAX_BINDINGS", 10), 1),
            default_debug=_env_bool("UI_DEFAULT_DEBUG", False),
            log_dir=_env("LOG_DIR", "logs") or "logs",
        )
