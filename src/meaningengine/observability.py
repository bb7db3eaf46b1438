"""In-process query metrics for operators and catalog loads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock

logger = logging.getLogger(__name__)


@dataclass
class QuerySummary:
    """Aggregated metrics for one query operation."""

    calls: int = 0
    total_ms: float = 0.0
    max_ms: float = 0.0
    total_results: int = 0
    last_results: int = 0


class _QueryRecorder:
    def __init__(self) -> None:
        self._lock = Lock()
        self._stats: dict[str, QuerySummary] = {}

    def record(self, *, operation: str, duration_ms: float, result_count: int) -> None:
        elapsed = max(float(duration_ms), 0.0)
        count = max(int(result_count), 0)
        with self._lock:
            summary = self._stats.setdefault(operation, QuerySummary())
            summary.calls += 1
            summary.total_ms += elapsed
            summary.max_ms = max(summary.max_ms, elapsed)
            summary.total_results += count
            summary.last_results = count

        logger.debug(
            "query operation=%s duration_ms=%.3f results=%d",
            operation,
            elapsed,
            count,
        )

    def snapshot(self) -> dict[str, dict[str, float | int]]:
        with self._lock:
            return {
                operation: {
                    "calls": summary.calls,
                    "total_ms": round(summary.total_ms, 3),
                    "avg_ms": round(summary.total_ms / summary.calls, 3),
                    "max_ms": round(summary.max_ms, 3),
                    "total_results": summary.total_results,
                    "last_results": summary.last_results,
                }
                for operation, summary in sorted(self._stats.items())
            }

    def reset(self) -> None:
        with self._lock:
            self._stats.clear()


_RECORDER = _QueryRecorder()


def record_query(*, operation: str, duration_ms: float, result_count: int = 0) -> None:
    """Record one query execution."""
    _RECORDER.record(
        operation=operation, duration_ms=duration_ms, result_count=result_count
    )


def query_metrics_snapshot() -> dict[str, dict[str, float | int]]:
    """Return current in-process query aggregates."""
    return _RECORDER.snapshot()


def reset_query_metrics() -> None:
    """Clear all query aggregates (test helper)."""
    _RECORDER.reset()
