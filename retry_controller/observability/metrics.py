"""Per-run metrics collection and reporting.

Provides RunMetrics dataclass for structured observability data, RunTimer
context manager for measuring a run's wall time, and log_run_metrics() for
emitting metrics as structured JSON to stdout.
"""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass
from datetime import UTC, datetime


@dataclass
class RunMetrics:
    """All metrics collected for a single RetryController.run() call."""

    controller: str
    status: str
    attempts: int
    waits: int
    total_backoff_seconds: float
    wall_time_seconds: float
    error_type: str | None = None
    error_message: str | None = None


class RunTimer:
    """Context manager that records wall-clock duration of a run.

    Usage:
        timer = RunTimer()
        with timer:
            await controller_loop()
        print(timer.duration_seconds)
    """

    def __init__(self) -> None:
        self.start_time: datetime | None = None
        self.end_time: datetime | None = None
        self.duration_seconds: float = 0.0
        self._mono_start: float = 0.0

    def __enter__(self) -> RunTimer:
        self.start_time = datetime.now(UTC)
        self._mono_start = time.monotonic()
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.duration_seconds = time.monotonic() - self._mono_start
        self.end_time = datetime.now(UTC)


def log_run_metrics(metrics: RunMetrics) -> None:
    """Emit run metrics as a single structured JSON line to stdout.

    Args:
        metrics: Populated RunMetrics dataclass.
    """
    entry = {
        "timestamp": datetime.now(UTC).isoformat(),
        "severity": "INFO",
        "metric_type": "retry_run",
        **asdict(metrics),
    }
    print(json.dumps(entry))
