"""Root logger setup for the service and the CLI.

``setup_logging()`` runs once at startup (``main.py`` or the CLI entry point).
Modules log through ``logging.getLogger(__name__)``.

With ``LOG_FORMAT=json`` every record is one JSON object per line. Records
emitted by ``RequestLogger`` carry their request event (method, path, status,
caller, error) as top-level keys so log shippers can index them.
"""
from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Dict

DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"
TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

QUIET_LOGGERS = ("urllib3", "httpx", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """One JSON object per record; message text is escaped properly."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "time": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        event = getattr(record, "event", None)
        if isinstance(event, dict):
            for key, value in event.items():
                if key != "timestamp" and value is not None:
                    entry[key] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def setup_logging() -> None:
    """Configure the root logger from ``LOG_LEVEL`` (default INFO) and ``LOG_FORMAT`` (json or text)."""
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(os.getenv("LOG_FORMAT", "json").lower()))

    root = logging.getLogger()
    # uvicorn --reload imports the app again
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["JsonFormatter", "build_formatter", "setup_logging"]
