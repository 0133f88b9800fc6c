"""Structured JSON logging for retry diagnostics.

One JSON object per line on stdout. Retry context passed through the
`extra` kwarg (controller, attempt, delay, countdown, error) is lifted into
top-level keys so log pipelines can filter on it.
"""

import json
import logging
import sys
from datetime import UTC, datetime

# Keys the controller attaches via `extra=`
CONTEXT_FIELDS: tuple[str, ...] = (
    "controller",
    "attempt",
    "delay_seconds",
    "seconds_before_retry",
    "error",
)


class StructuredJsonFormatter(logging.Formatter):
    """Render a LogRecord as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a JSON string.

        Args:
            record: The log record to format.

        Returns:
            JSON with timestamp, severity, logger, message and any retry
            context fields present on the record.
        """
        created = datetime.fromtimestamp(record.created, UTC)
        entry: dict[str, object] = {
            "timestamp": created.strftime("%Y-%m-%dT%H:%M:%SZ"),
            "severity": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key))
            for key in CONTEXT_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = str(record.exc_info[1])
        return json.dumps(entry, default=str)


def configure_logging(level: int = logging.INFO) -> None:
    """Route the root logger through StructuredJsonFormatter.

    Safe to call repeatedly: a second JSON handler is never added.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if not any(isinstance(h.formatter, StructuredJsonFormatter) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredJsonFormatter())
        root.addHandler(handler)
