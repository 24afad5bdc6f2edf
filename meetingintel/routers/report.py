"""Router for the consolidated report endpoint (no LLM call)."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from meetingintel.models import ConsolidatedReportRequest, ErrorResult
from meetingintel.present.consolidated import build_consolidated_report
from meetingintel.rate_limit import RATE_LIMIT_DEFAULT, limiter

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/report", tags=["report"])


@router.post("/consolidated")
@limiter.limit(RATE_LIMIT_DEFAULT)
def consolidated_report_endpoint(request: Request, payload: Any = Body(default=None)):
    """Merge already generated section Markdown into one report."""
    try:
        req = ConsolidatedReportRequest.model_validate(payload or {})
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        log.warning("consolidated report: invalid body: %s", exc)
        error = ErrorResult(error=f"Solicitud inválida: revisa los campos {fields}")
        return JSONResponse(content=error.model_dump(), status_code=400)

    meeting = req.meeting_info.with_defaults()
    provided = sorted(key for key, value in req.sections.items() if value)
    log.info("consolidated report: sections=%s", provided)
    markdown = build_consolidated_report(req.sections, meeting.title, meeting.type)
    return {"ok": True, "markdown": markdown, "section": "consolidated"}
