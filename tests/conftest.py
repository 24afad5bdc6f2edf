"""Shared fixtures for the MeetingIntel test suite."""
from __future__ import annotations

import os
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from meetingintel.rate_limit import insights_limiter, limiter


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Every test starts with empty rate-limit counters."""
    insights_limiter.reset()
    limiter.reset()
    yield
    insights_limiter.reset()
    limiter.reset()


@pytest.fixture
def api_key(monkeypatch) -> str:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    return "sk-test"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

SAMPLE_TRANSCRIPT = """\
Ana (Gerente Comercial): Gracias por venir. Queremos reducir el tiempo de cierre de ventas.
Luis (CTO): Hoy tardamos tres semanas en preparar cada propuesta y perdemos oportunidades.
Ana: Si automatizamos los reportes podríamos responder en dos días.
Luis: Necesitamos ver un demo técnico antes de fin de mes.
"""


@pytest.fixture
def sample_transcript() -> str:
    return SAMPLE_TRANSCRIPT


@pytest.fixture
def fixed_now() -> datetime:
    # 2026-10-19 15:30:00 UTC == 12:30:00 in Santiago (UTC-3)
    return datetime(2026, 10, 19, 15, 30, 0, tzinfo=timezone.utc)


def make_response(status_code: int = 200, json_body=None, text: str = "") -> MagicMock:
    """Build a fake ``requests.Response``."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.json.return_value = json_body if json_body is not None else {}
    resp.text = text
    return resp


@pytest.fixture
def provider_response():
    return make_response
