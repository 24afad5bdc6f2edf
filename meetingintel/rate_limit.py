"""Centralized rate-limiting configuration.

Two limiters share the same caller identity and storage URI:

- ``insights_limiter``: a fixed-window counter (10 requests per caller per
  60 s by default) consulted by the insights dispatcher before any other work.
  It is an explicit collaborator with an ``allow(caller_id) -> bool`` contract
  so denials produce the service's own JSON envelope.
- ``limiter``: the `slowapi` limiter applied with ``@limiter.limit`` to the
  cheaper auxiliary routes.

Both are backed by `limits`. The windows start at a caller's first hit, so a
caller may burst up to twice the capacity across a window boundary.

Env vars
--------
RATE_LIMIT_INSIGHTS : str
    Quota for ``POST /api/insights`` (e.g. ``"10/minute"``).
RATE_LIMIT_DEFAULT : str
    Default limit for the other routes (e.g. ``"60/minute"``).
RATE_LIMIT_STORAGE_URI : str
    ``memory://`` (per process, default) or a shared store such as
    ``redis://host:6379`` to enforce limits across workers.
"""
from __future__ import annotations

import logging
import threading

from fastapi import Request
from limits import parse
from limits.storage import storage_from_string
from limits.strategies import FixedWindowRateLimiter
from slowapi import Limiter

from meetingintel.config import (
    RATE_LIMIT_DEFAULT,
    RATE_LIMIT_INSIGHTS,
    RATE_LIMIT_STORAGE_URI,
)

log = logging.getLogger(__name__)

UNKNOWN_CALLER = "unknown"


def caller_identity(request: Request) -> str:
    """Key rate-limit state by the forwarded-address header.

    The header is client-controlled unless a trusted proxy overwrites it;
    callers without it all share the ``"unknown"`` bucket.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded and forwarded.strip():
        return forwarded.strip()
    return UNKNOWN_CALLER


class FixedWindowLimiter:
    """Fixed-window request counter keyed by caller identity.

    A caller's first request opens a window with count 1. Requests inside the
    window are allowed while ``count < capacity`` and increment the count; the
    rest are denied without touching the counter. Once the window elapses the
    next request opens a fresh one.
    """

    def __init__(
        self,
        limit: str = RATE_LIMIT_INSIGHTS,
        storage_uri: str = RATE_LIMIT_STORAGE_URI,
        namespace: str = "insights",
    ):
        self.item = parse(limit)
        self.storage_uri = storage_uri
        self.namespace = namespace
        self.storage = storage_from_string(storage_uri)
        self._strategy = FixedWindowRateLimiter(self.storage)
        # test-then-hit must not interleave between threadpool workers
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self.item.amount

    @property
    def window_seconds(self) -> int:
        return self.item.get_expiry()

    def allow(self, caller_id: str) -> bool:
        """Return True and count the request if the caller is under quota."""
        try:
            with self._lock:
                if not self._strategy.test(self.item, self.namespace, caller_id):
                    return False
                return self._strategy.hit(self.item, self.namespace, caller_id)
        except Exception:
            # storage outage: fail open, the request itself is still served
            log.exception("Rate limit storage error for caller %s", caller_id)
            return True

    def reset(self) -> None:
        """Drop every counter (tests and operator use)."""
        self.storage.reset()


# Single instances shared across the app
insights_limiter = FixedWindowLimiter()
limiter = Limiter(
    key_func=caller_identity,
    default_limits=[RATE_LIMIT_DEFAULT],
    storage_uri=RATE_LIMIT_STORAGE_URI,
)

__all__ = [
    "FixedWindowLimiter",
    "caller_identity",
    "insights_limiter",
    "limiter",
    "RATE_LIMIT_DEFAULT",
    "RATE_LIMIT_INSIGHTS",
    "UNKNOWN_CALLER",
]
