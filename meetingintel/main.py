"""FastAPI app for the MeetingIntel Agent.

Endpoints:
  POST /api/insights               -> analyze a transcript (full report or one section)
  POST /api/report/consolidated    -> merge section Markdown into one report
  GET  /health                     -> configuration check, no outbound calls

Run locally with::

    uvicorn meetingintel.main:app --reload
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from meetingintel.config import APP_ENV, CORS_ORIGINS, OPENAI_MODEL, get_openai_api_key
from meetingintel.logging_config import setup_logging
from meetingintel.rate_limit import insights_limiter, limiter
from meetingintel.routers import insights, report

setup_logging()
log = logging.getLogger(__name__)

app = FastAPI(title="MeetingIntel Agent API")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    log.debug("Incoming request: %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception as exc:
        log.exception("Error handling request %s %s: %s", request.method, request.url.path, exc)
        raise
    log.debug("Response %s for %s %s", response.status_code, request.method, request.url.path)
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(insights.router)
app.include_router(report.router)


@app.get("/")
async def root():
    """Service info with the list of endpoints."""
    return {
        "service": "meetingintel-agent",
        "environment": APP_ENV,
        "endpoints": [
            {"path": "/api/insights", "method": "POST", "desc": "analyze a meeting transcript with the LLM"},
            {"path": "/api/report/consolidated", "method": "POST", "desc": "merge section reports into one document"},
            {"path": "/health", "method": "GET", "desc": "configuration health check"},
        ],
    }


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "checks": {
            "openai": {
                "status": "configured" if get_openai_api_key() else "not_configured",
                "model": OPENAI_MODEL,
            },
            "rate_limit": {
                "storage": insights_limiter.storage_uri.split("://", 1)[0],
                "insights_quota": f"{insights_limiter.capacity}/{insights_limiter.window_seconds}s",
            },
        },
    }
