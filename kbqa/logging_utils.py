"""kbqa.logging_utils

Logging utilities:
- Rotating file log under LOG_DIR for catalog loading and matching diagnostics
- Console mirror for scripts
- Per-request detail goes to kbqa.tracing.TraceCollector, not to the log
"""

from __future__ import annotations
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def build_logger(log_dir: str, name: str = "kbqa", level: int = logging.INFO) -> logging.Logger:
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Streamlit reruns and repeated script wiring must not stack handlers
    if logger.handlers:
        return logger

    fmt = logging.Formatter(LOG_FORMAT)

    handler = RotatingFileHandler(
        str(Path(log_dir) / "kbqa.log"), maxBytes=2_000_000, backupCount=5, encoding="utf-8"
    )
    handler.setFormatter(fmt)
    logger.addHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(fmt)
    logger.addHandler(console)
    return logger


def engine_logger(name: str) -> logging.Logger:
    """Child logger used by engine components when none is injected."""
    return logging.getLogger(f"kbqa.{name}")
