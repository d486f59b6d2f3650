"""kbqa.paths

Helpers for resolving file system paths consistently (scripts and Streamlit can run from different CWDs).
"""

from __future__ import annotations
from pathlib import Path


def project_root() -> Path:
    """Return the repository root folder (parent of `kbqa/`)."""
    return Path(__file__).resolve().parents[1]


def data_dir() -> Path:
    """Return the default data directory under the repo."""
    return project_root() / "data"


def default_catalog_path() -> Path:
    return data_dir() / "query_templates.json"


def default_questions_path() -> Path:
    return data_dir() / "sample_questions.jsonl"
