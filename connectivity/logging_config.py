"""Structured JSON logging configuration.

Every entry carries timestamp, level, logger and message. Probe and
resolution logs attach contextual fields through ``extra``: candidate_url,
probe_strategy, status_code, error_reason, duration_ms, attempts.

Query strings are stripped from logged URLs and key/token style values are
redacted.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone

_SENSITIVE_PATTERNS = re.compile(
    r"(api.key|secret|password|token|authorization)[\s]*[=:]\s*\S+",
    re.IGNORECASE,
)

_CONTEXT_FIELDS = (
    "candidate_url",
    "probe_strategy",
    "status_code",
    "error_reason",
    "duration_ms",
    "attempts",
)


class JsonFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self._sanitize(record.getMessage()),
        }

        for name in _CONTEXT_FIELDS:
            if not hasattr(record, name):
                continue
            value = getattr(record, name)
            if name == "candidate_url" and isinstance(value, str):
                value = value.split("?", 1)[0]
            elif name == "error_reason":
                value = self._sanitize(str(value))
            entry[name] = value

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self._sanitize(self.formatException(record.exc_info))

        return json.dumps(entry, default=str)

    @staticmethod
    def _sanitize(text: str) -> str:
        return _SENSITIVE_PATTERNS.sub("[REDACTED]", text)


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger with JSON formatting.

    Parameters
    ----------
    level:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
