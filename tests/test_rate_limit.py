"""Tests for meetingintel.rate_limit — fixed-window limiter and caller identity."""
from __future__ import annotations

import threading
import time
from unittest.mock import MagicMock, patch

import pytest

from meetingintel.rate_limit import (
    FixedWindowLimiter,
    UNKNOWN_CALLER,
    caller_identity,
    insights_limiter,
)


# =====================================================================
# FixedWindowLimiter.allow
# =====================================================================

class TestFixedWindowLimiter:

    def test_defaults_are_ten_per_minute(self):
        assert insights_limiter.capacity == 10
        assert insights_limiter.window_seconds == 60

    def test_first_ten_allowed_eleventh_denied(self):
        rl = FixedWindowLimiter("10/minute")
        results = [rl.allow("1.2.3.4") for _ in range(11)]
        assert results[:10] == [True] * 10
        assert results[10] is False

    def test_denied_requests_stay_denied_within_window(self):
        rl = FixedWindowLimiter("3/minute")
        for _ in range(3):
            assert rl.allow("a")
        assert not rl.allow("a")
        assert not rl.allow("a")

    def test_callers_are_counted_separately(self):
        rl = FixedWindowLimiter("2/minute")
        assert rl.allow("a")
        assert rl.allow("a")
        assert not rl.allow("a")
        assert rl.allow("b")

    def test_window_expiry_resets_counter(self):
        rl = FixedWindowLimiter("2/second")
        assert rl.allow("a")
        assert rl.allow("a")
        assert not rl.allow("a")
        time.sleep(1.2)
        assert rl.allow("a")

    def test_reset_clears_all_callers(self):
        rl = FixedWindowLimiter("1/minute")
        assert rl.allow("a")
        assert not rl.allow("a")
        rl.reset()
        assert rl.allow("a")

    def test_concurrent_callers_never_exceed_capacity(self):
        rl = FixedWindowLimiter("10/minute")
        results = []
        lock = threading.Lock()

        def worker():
            allowed = rl.allow("same-caller")
            with lock:
                results.append(allowed)

        threads = [threading.Thread(target=worker) for _ in range(50)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 10
        assert results.count(False) == 40

    def test_storage_error_fails_open(self):
        rl = FixedWindowLimiter("1/minute")
        with patch.object(rl, "_strategy") as strategy:
            strategy.test.side_effect = RuntimeError("storage down")
            assert rl.allow("a") is True


# =====================================================================
# caller_identity
# =====================================================================

def _request_with_headers(headers: dict) -> MagicMock:
    request = MagicMock()
    request.headers = {k.lower(): v for k, v in headers.items()}
    return request


class TestCallerIdentity:

    def test_uses_forwarded_for_header(self):
        assert caller_identity(_request_with_headers({"X-Forwarded-For": "10.0.0.1"})) == "10.0.0.1"

    def test_keeps_whole_header_value(self):
        req = _request_with_headers({"X-Forwarded-For": " 10.0.0.1, 172.16.0.2 "})
        assert caller_identity(req) == "10.0.0.1, 172.16.0.2"

    @pytest.mark.parametrize("headers", [{}, {"X-Forwarded-For": ""}, {"X-Forwarded-For": "   "}])
    def test_missing_header_falls_back_to_unknown(self, headers):
        assert caller_identity(_request_with_headers(headers)) == UNKNOWN_CALLER
        assert UNKNOWN_CALLER == "unknown"
