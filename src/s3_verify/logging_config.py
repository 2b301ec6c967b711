"""Logging setup for s3-verify runs.

Two kinds of records carry structured payloads as ``extra`` fields:
test failures from the driver (``error``) and HTTP round trips from the
verbose session hook (``request`` and ``response``).
"""

import json
import logging
import sys
from datetime import datetime, timezone

# Record attributes copied into JSON output and dumped under text lines.
PAYLOAD_FIELDS = ("error", "request", "response")

# Libraries whose DEBUG output would bury the request traces.
QUIET_LOGGERS = ("botocore", "boto3", "urllib3", "s3transfer")

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _payloads(record: logging.LogRecord) -> dict:
    return {
        name: getattr(record, name)
        for name in PAYLOAD_FIELDS
        if getattr(record, name, None) is not None
    }


class TraceFormatter(logging.Formatter):
    """Text formatter that prints trace payloads as indented JSON blocks."""

    def __init__(self):
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        blocks = [
            f"{name.upper()}:\n{json.dumps(payload, indent=2, default=str)}"
            for name, payload in _payloads(record).items()
        ]
        return "\n".join([line] + blocks)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, payload fields included."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(_payloads(record))
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def configure_logging(level: str = "INFO", fmt: str = "text", stream=None) -> None:
    """Send run logs to stderr (or ``stream``).

    Args:
        level: Log level name. DEBUG turns on request traces.
        fmt: 'text' for human-readable, 'json' for one object per line.
        stream: Destination, stderr when omitted.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(numeric_level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TraceFormatter())
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
