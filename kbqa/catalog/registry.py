"""kbqa.catalog.registry

Loads the query-template catalog from a JSON file.

File layout: either {"templates": [...]} or a bare list. Entry keys are snake_case; the
camelCase keys of older catalog files (questionStartWord, containsSuperlative,
exampleQuestions, sparqlTemplates, resourceAmount, ontologyAmount) are accepted too.

Loading never raises: a missing, unreadable or malformed file yields an empty catalog plus
an error string, so callers can still tell "no templates configured" from "failed to load".
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

from kbqa.contracts.models import QueryTemplate
from kbqa.errors import CatalogError
from kbqa.logging_utils import engine_logger
from kbqa.paths import default_catalog_path


_ALIASES = {
    "start_words": ("start_words", "questionStartWord"),
    "superlative": ("superlative", "containsSuperlative"),
    "examples": ("examples", "exampleQuestions"),
    "query_bodies": ("query_bodies", "sparqlTemplates"),
    "min_bound_entities": ("min_bound_entities", "resourceAmount"),
    "min_ontology_refs": ("min_ontology_refs", "ontologyAmount"),
}


@dataclass(frozen=True)
class TemplateCatalog:
    """Immutable, ordered collection of query templates."""
    templates: tuple[QueryTemplate, ...] = ()

    def __len__(self) -> int:
        return len(self.templates)

    def __iter__(self) -> Iterator[QueryTemplate]:
        return iter(self.templates)

    def get(self, template_id: str) -> Optional[QueryTemplate]:
        for t in self.templates:
            if t.id == template_id:
                return t
        return None

    def ids(self) -> list[str]:
        return [t.id for t in self.templates]


EMPTY_CATALOG = TemplateCatalog()


@dataclass(frozen=True)
class CatalogLoadResult:
    catalog: TemplateCatalog
    source: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _pick(entry: dict[str, Any], field_name: str, default: Any = None) -> Any:
    for key in _ALIASES[field_name]:
        if key in entry:
            return entry[key]
    return default


def _string_list(entry: dict[str, Any], field_name: str, idx: int) -> tuple[str, ...]:
    raw = _pick(entry, field_name)
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not raw:
        raise CatalogError(f"Template #{idx}: '{field_name}' must be a non-empty list")
    if not all(isinstance(x, str) and x for x in raw):
        raise CatalogError(f"Template #{idx}: '{field_name}' must contain non-empty strings")
    return tuple(raw)


def _non_negative_int(entry: dict[str, Any], field_name: str, idx: int) -> int:
    raw = _pick(entry, field_name, 0)
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise CatalogError(f"Template #{idx}: '{field_name}' must be a non-negative integer")
    return raw


def parse_template(entry: Any, idx: int) -> QueryTemplate:
    """Build one QueryTemplate from a decoded JSON entry (idx is 1-based, used for ids and messages)."""
    if not isinstance(entry, dict):
        raise CatalogError(f"Template #{idx}: expected an object, got {type(entry).__name__}")

    superlative = _pick(entry, "superlative", False)
    if not isinstance(superlative, bool):
        raise CatalogError(f"Template #{idx}: 'superlative' must be a boolean")

    return QueryTemplate(
        id=str(entry.get("id") or f"template_{idx}"),
        start_words=frozenset(_string_list(entry, "start_words", idx)),
        superlative=superlative,
        examples=_string_list(entry, "examples", idx),
        query_bodies=_string_list(entry, "query_bodies", idx),
        min_bound_entities=_non_negative_int(entry, "min_bound_entities", idx),
        min_ontology_refs=_non_negative_int(entry, "min_ontology_refs", idx),
    )


def parse_catalog(obj: Any) -> TemplateCatalog:
    entries = obj.get("templates") if isinstance(obj, dict) else obj
    if not isinstance(entries, list):
        raise CatalogError("Catalog must be a list of templates or an object with a 'templates' list")

    templates = [parse_template(e, i) for i, e in enumerate(entries, start=1)]
    seen: set[str] = set()
    for t in templates:
        if t.id in seen:
            raise CatalogError(f"Duplicate template id: {t.id}")
        seen.add(t.id)
    return TemplateCatalog(tuple(templates))


class FileCatalogSource:
    """Reads the catalog from a JSON file once per `load()` call."""

    def __init__(self, path: Optional[str] = None, logger: Optional[logging.Logger] = None):
        self.path = Path(path).expanduser() if path else default_catalog_path()
        self.logger = logger or engine_logger("catalog")

    def load(self) -> CatalogLoadResult:
        source = str(self.path)
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return self._failed(source, f"Cannot read catalog: {e}")

        if not text.strip():
            self.logger.warning("Catalog file %s is empty", source)
            return CatalogLoadResult(EMPTY_CATALOG, source)

        try:
            catalog = parse_catalog(json.loads(text))
        except json.JSONDecodeError as e:
            return self._failed(source, f"Invalid catalog JSON: {e}")
        except CatalogError as e:
            return self._failed(source, str(e))

        self.logger.info("Loaded %d query templates from %s", len(catalog), source)
        return CatalogLoadResult(catalog, source)

    def _failed(self, source: str, error: str) -> CatalogLoadResult:
        self.logger.error("%s (%s)", error, source)
        return CatalogLoadResult(EMPTY_CATALOG, source, error=error)


class CatalogHolder:
    """Copy-on-write holder for the live catalog.

    Readers call `current()` once per matching call and keep that snapshot; `reload()` builds a
    complete new catalog before swapping the reference, so in-flight matches never see a
    half-updated catalog. A failed reload keeps the previous catalog.
    """

    def __init__(self, source: FileCatalogSource):
        self.source = source
        self._write_lock = threading.Lock()
        self._last = source.load()
        self._catalog = self._last.catalog

    def current(self) -> TemplateCatalog:
        return self._catalog

    @property
    def last_result(self) -> CatalogLoadResult:
        return self._last

    def reload(self) -> CatalogLoadResult:
        with self._write_lock:
            result = self.source.load()
            self._last = result
            if result.ok:
                self._catalog = result.catalog
            return result
