"""kbqa.substitution.parameter_substitutor

Binds the entities recognized in a question into a template's query bodies.

Strategy:
- Query bodies carry placeholders {r0}, {r1}, ... for resources and {o0}, ... for ontology terms.
  Indices are numeric, so {r01} names the same slot as {r1}.
- Resource / ontology URIs are taken from the question tokens in order of appearance (deduplicated).
- Every ordered assignment of distinct URIs to a body's placeholder indices is rendered, so a
  question naming two resources yields both orientations of a two-resource body.
- A body needing more URIs of a kind than the question provides yields nothing.
"""

from __future__ import annotations

import logging
import re
from itertools import permutations, product
from typing import Iterator, Optional, Sequence

from kbqa.contracts.collaborators import ParameterSubstitutor
from kbqa.contracts.models import BoundQuery, QueryTemplate, Token
from kbqa.logging_utils import engine_logger

PLACEHOLDER_RE = re.compile(r"\{([ro])(\d+)\}")


def placeholder_slots(body: str) -> dict[str, int]:
    """Number of distinct URIs a body needs per kind: {"r": n, "o": m}."""
    need = {"r": 0, "o": 0}
    for kind, idx in PLACEHOLDER_RE.findall(body):
        need[kind] = max(need[kind], int(idx) + 1)
    return need


def ordered_uris(tokens: Sequence[Token], kind: str) -> list[str]:
    out: list[str] = []
    for t in tokens:
        if t.kind == kind and t.uri and t.uri not in out:
            out.append(t.uri)
    return out


def sparql_term(uri: str) -> str:
    if uri.startswith("<") and uri.endswith(">"):
        return uri
    return f"<{uri}>"


def render_template(body: str, params: dict[str, str]) -> str:
    return PLACEHOLDER_RE.sub(lambda m: sparql_term(params[f"{m.group(1)}{int(m.group(2))}"]), body)


def _assignments(prefix: str, uris: list[str], needed: int) -> Iterator[dict[str, str]]:
    for combo in permutations(uris, needed):
        yield {f"{prefix}{i}": uri for i, uri in enumerate(combo)}


class DefaultParameterSubstitutor(ParameterSubstitutor):
    def __init__(self, max_bindings: int = 10, logger: Optional[logging.Logger] = None):
        self.max_bindings = max_bindings
        self.logger = logger or engine_logger("substitution")

    def bind(self, tokens: Sequence[Token], example: str, template: QueryTemplate) -> list[BoundQuery]:
        resources = ordered_uris(tokens, "resource")
        ontologies = ordered_uris(tokens, "ontology")

        out: list[BoundQuery] = []
        for body in template.query_bodies:
            need = placeholder_slots(body)
            if need["r"] > len(resources) or need["o"] > len(ontologies):
                self.logger.debug(
                    "Template %s body needs %d resources / %d ontologies, question has %d / %d",
                    template.id, need["r"], need["o"], len(resources), len(ontologies),
                )
                continue

            for r_params, o_params in product(
                _assignments("r", resources, need["r"]), _assignments("o", ontologies, need["o"])
            ):
                params = {**r_params, **o_params}
                out.append(BoundQuery(query=render_template(body, params), body=body, example=example, bindings=params))
                if len(out) >= self.max_bindings:
                    return out
        return out
