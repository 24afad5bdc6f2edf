"""Router for the meeting analysis endpoint (LLM call)."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from meetingintel.insights import INSIGHTS_PATH, InsightsDispatcher, get_dispatcher
from meetingintel.rate_limit import caller_identity

router = APIRouter(tags=["insights"])


@router.post(INSIGHTS_PATH)
async def insights_endpoint(
    request: Request,
    dispatcher: InsightsDispatcher = Depends(get_dispatcher),
):
    """Analyze a meeting transcript, optionally for a single report section.

    The body is read only after the rate-limit and configuration gates pass,
    so it is parsed by the dispatcher rather than declared as a model here.
    """
    status, body = await dispatcher.handle(
        caller_identity(request),
        request.json,
        method=request.method,
        path=request.url.path,
    )
    return JSONResponse(content=body, status_code=status)
