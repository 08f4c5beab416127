"""Timing of Order Store operations."""

import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generator

from parts_admin.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TraceEvent:
    """One timed operation."""

    timestamp: datetime
    operation: str
    duration_ms: float | None = None
    success: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)


class OperationTracer:
    """Keeps the most recent operation timings of a component."""

    def __init__(self, component: str, max_events: int = 500):
        self.component = component
        self.events: deque[TraceEvent] = deque(maxlen=max_events)
        self.start_time = time.time()

    def add_event(
        self,
        operation: str,
        duration_ms: float | None = None,
        success: bool = True,
        **metadata: Any,
    ) -> None:
        """Add a trace event."""
        event = TraceEvent(
            timestamp=datetime.now(timezone.utc),
            operation=operation,
            duration_ms=duration_ms,
            success=success,
            metadata=metadata,
        )
        self.events.append(event)

        logger.debug(
            "trace_event",
            component=self.component,
            operation=operation,
            duration_ms=duration_ms,
            success=success,
            **metadata,
        )

    @contextmanager
    def trace_operation(self, operation: str, **metadata: Any) -> Generator[None, None, None]:
        """Context manager to trace an operation with timing."""
        start = time.time()
        success = False
        try:
            yield
            success = True
        finally:
            duration_ms = (time.time() - start) * 1000
            self.add_event(operation, duration_ms=duration_ms, success=success, **metadata)

    def get_trace_summary(self) -> dict[str, Any]:
        """Per-operation counts, failures and durations."""
        operation_stats: dict[str, dict[str, Any]] = {}
        for event in self.events:
            if event.operation not in operation_stats:
                operation_stats[event.operation] = {
                    "count": 0,
                    "failures": 0,
                    "total_duration_ms": 0.0,
                }

            stats = operation_stats[event.operation]
            stats["count"] += 1
            if not event.success:
                stats["failures"] += 1
            if event.duration_ms:
                stats["total_duration_ms"] += event.duration_ms

        for stats in operation_stats.values():
            stats["avg_duration_ms"] = stats["total_duration_ms"] / stats["count"]

        return {
            "component": self.component,
            "uptime_ms": (time.time() - self.start_time) * 1000,
            "total_events": len(self.events),
            "operations": operation_stats,
        }
