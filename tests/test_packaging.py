from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parents[1]


def test_project_metadata_has_no_internal_readme():
    meta = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))["project"]
    readme = meta.get("readme")
    if readme is not None:
        assert readme != "SPEC_FULL.md"
        assert (ROOT / readme).is_file()
    assert meta["name"] == "kbqa-templates"
