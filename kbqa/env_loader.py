"""kbqa.env_loader

Seeds KBQA_* / LOG_DIR settings from a .env file using python-dotenv.

Lookup order when no explicit path is given:
  1. nearest .env walking upward from the current working directory
  2. .env at the repository root

Variables already present in the environment win unless `override=True`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from kbqa.paths import project_root


def _walk_up_for_dotenv(start: Path, max_levels: int = 6) -> Optional[Path]:
    cur = start.resolve()
    for _ in range(max_levels + 1):
        candidate = cur / ".env"
        if candidate.is_file():
            return candidate
        if cur.parent == cur:
            break
        cur = cur.parent
    return None


def resolve_dotenv(dotenv_path: str | None = None) -> Optional[Path]:
    """Return the .env file that `load_env` would use, or None."""
    if dotenv_path:
        p = Path(dotenv_path).expanduser()
        return p if p.is_file() else None

    found = _walk_up_for_dotenv(Path.cwd())
    if found:
        return found
    root_env = project_root() / ".env"
    return root_env if root_env.is_file() else None


def load_env(dotenv_path: str | None = None, override: bool = False) -> str | None:
    """Load env vars from .env and return the path used (None when nothing was found)."""
    path = resolve_dotenv(dotenv_path)
    if path is None:
        return None
    load_dotenv(dotenv_path=str(path), override=override)
    return str(path)
