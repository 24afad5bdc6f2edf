"""Per-request outcome logging.

Every response of the insights endpoint is recorded as one log line carrying
timestamp, method, path, status, caller and optional error text. In
production an injected sink (e.g. a log shipper) also receives the event.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from meetingintel.config import APP_ENV

log = logging.getLogger(__name__)

LogSink = Callable[[Dict[str, Any]], None]


class RequestLogger:
    """Log request outcomes and optionally forward them to an external sink."""

    def __init__(self, sink: Optional[LogSink] = None, environment: Optional[str] = None):
        self.sink = sink
        self.environment = (environment or APP_ENV).lower()

    @property
    def forwarding_enabled(self) -> bool:
        return self.environment == "production" and self.sink is not None

    def log_request(
        self,
        caller: str,
        method: str,
        path: str,
        status: int,
        error: Optional[str] = None,
    ) -> Dict[str, Any]:
        event = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": method,
            "path": path,
            "status": status,
            "caller": caller,
            "error": error,
        }

        if status >= 500:
            level = logging.ERROR
        elif status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        log.log(
            level,
            "%s %s - %s - IP: %s%s",
            method,
            path,
            status,
            caller,
            f" - Error: {error}" if error else "",
            extra={"event": event},
        )

        if self.forwarding_enabled:
            try:
                self.sink(event)
            except Exception:
                log.exception("Failed to forward request log event")
        return event


__all__ = ["RequestLogger", "LogSink"]
