"""kbqa.tracing

Diagnostics sink for debug mode.

One collector per matching call: the matcher and aggregator append a structured payload per
step (template rejected, template accepted, bindings produced) and the CLI / UI render it.
Collectors are never shared between calls, so matching stays free of shared mutable state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class TraceCollector:
    """Collects per-step traces for a single matching call."""
    traces: list[dict[str, Any]] = field(default_factory=list)

    def add(self, step_name: str, payload: dict[str, Any]) -> None:
        self.traces.append({"step": step_name, "payload": payload})

    def steps(self, step_name: str) -> list[dict[str, Any]]:
        return [t["payload"] for t in self.traces if t["step"] == step_name]


def trace(tracer: Optional[TraceCollector], step_name: str, payload: dict[str, Any]) -> None:
    if tracer is not None:
        tracer.add(step_name, payload)
