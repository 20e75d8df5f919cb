"""Tool telemetry for the filter engine.

Each MCP call is timed and logged under one trace id. Besides per-tool call
and error counts, the counters record which DSL rules callers break (by
violation kind and by filter id), which other-bucket filters a compile had to
leave out, and how often each filter's values are looked up.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..domain.errors import FilterIssue

_LOGGER = logging.getLogger("prospect_filters.mcp")

METRICS: dict[str, dict[str, int]] = {
    "tool_calls": {},
    "errors": {},
    "dsl_violations": {},
    "violating_filters": {},
    "cross_bucket_skipped": {},
    "value_lookups": {},
}


def get_logger() -> logging.Logger:
    return _LOGGER


def _bump(counter: str, key: str) -> None:
    counts = METRICS[counter]
    counts[key] = counts.get(key, 0) + 1


@dataclass
class ToolInvocation:
    """One timed tool call; ``finish`` logs it and updates the counters."""

    tool: str
    trace_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started: float = field(default_factory=time.monotonic)

    @property
    def latency_ms(self) -> float:
        return (time.monotonic() - self.started) * 1000

    def record_issues(self, issues: Iterable[FilterIssue]) -> None:
        record_dsl_issues(self.tool, self.trace_id, issues)

    def finish(self, error: str | None = None, **extra: Any) -> None:
        log_tool_invocation(self.tool, self.trace_id, self.latency_ms, error=error, extra=extra or None)


def start_tool(tool: str) -> ToolInvocation:
    return ToolInvocation(tool)


def log_tool_invocation(
    tool: str,
    trace_id: str | None,
    latency_ms: float,
    error: str | None = None,
    extra: dict[str, Any] | None = None,
) -> None:
    payload: dict[str, Any] = {
        "tool": tool,
        "trace_id": trace_id,
        "latency_ms": round(latency_ms, 2),
    }
    if error:
        payload["error"] = error
    if extra:
        payload.update(extra)
    _LOGGER.info("tool_invocation", extra=payload)
    _bump("tool_calls", tool)
    if error:
        _bump("errors", tool)


def record_dsl_issues(tool: str, trace_id: str | None, issues: Iterable[FilterIssue]) -> None:
    """Count each validation finding by violation kind and by filter id."""
    for issue in issues:
        _bump("dsl_violations", issue.violation)
        if issue.filter_id:
            _bump("violating_filters", issue.filter_id)
        _LOGGER.info("dsl_issue", extra={"tool": tool, "trace_id": trace_id, **issue.context()})


def record_skipped_filters(filter_ids: Iterable[str]) -> None:
    for filter_id in filter_ids:
        _bump("cross_bucket_skipped", filter_id)


def record_value_lookup(filter_id: str, found: bool) -> None:
    # Unknown ids are pooled under one key.
    _bump("value_lookups", filter_id if found else "<unknown>")


def metrics_snapshot() -> dict[str, dict[str, int]]:
    """Return a copy of the current counters."""
    return {k: dict(v) for k, v in METRICS.items()}


def reset_metrics() -> None:
    for counters in METRICS.values():
        counters.clear()
