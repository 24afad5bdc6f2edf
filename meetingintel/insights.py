"""Request dispatcher for ``POST /api/insights``.

A request moves through fixed gates, each of which can end it:

1. rate limit (per caller identity)
2. provider credential present
3. body parsed and transcript length validated
4. one chat-completion call with the selected prompt pair
5. provider answer mapped into the response envelope

Every outcome is logged through ``RequestLogger``. Failures are all-or-nothing:
the caller receives ``{"ok": false, "error": ...}`` and nothing else.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from meetingintel.config import (
    ANALYSIS_TEMPERATURE,
    MAX_TRANSCRIPT_LENGTH,
    MIN_TRANSCRIPT_LENGTH,
    get_openai_api_key,
)
from meetingintel.errors import (
    InsightsError,
    InvalidInput,
    MisconfiguredServer,
    RateLimited,
)
from meetingintel.llm_base import LLMClient
from meetingintel.models import AnalysisRequest, AnalysisResult, ErrorResult
from meetingintel.openai_client import OpenAIClient
from meetingintel.prompt_builder import format_fecha_cl, max_tokens_for, select_prompt
from meetingintel.rate_limit import FixedWindowLimiter, insights_limiter
from meetingintel.request_log import RequestLogger

log = logging.getLogger(__name__)

INSIGHTS_PATH = "/api/insights"

TRANSCRIPT_TOO_SHORT = 'Falta "transcript" o es muy corto (≥ 50 caracteres)'
TRANSCRIPT_TOO_LONG = (
    "La transcripción es demasiado larga (máximo 1,000,000 caracteres). "
    "Para reuniones muy largas, considera dividir en secciones."
)
NO_MODEL_OUTPUT = "No se recibió salida del modelo."
INTERNAL_ERROR = "Error interno del servidor"


def validate_transcript(transcript: str) -> None:
    """Raise ``InvalidInput`` unless the trimmed transcript length is in range."""
    length = len(transcript.strip())
    if length < MIN_TRANSCRIPT_LENGTH:
        raise InvalidInput(TRANSCRIPT_TOO_SHORT, detail="Invalid transcript length")
    if length > MAX_TRANSCRIPT_LENGTH:
        raise InvalidInput(TRANSCRIPT_TOO_LONG, detail="Transcript too long")


class InsightsDispatcher:
    """Validate, rate-limit and forward one analysis request to the provider.

    All collaborators are injectable; the defaults are the process-wide
    limiter, a plain ``RequestLogger`` and ``OpenAIClient``.
    """

    def __init__(
        self,
        rate_limiter: Optional[FixedWindowLimiter] = None,
        request_logger: Optional[RequestLogger] = None,
        client_factory: Optional[Callable[[str], LLMClient]] = None,
        api_key_provider: Callable[[], Optional[str]] = get_openai_api_key,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.rate_limiter = rate_limiter or insights_limiter
        self.request_logger = request_logger or RequestLogger()
        self.client_factory = client_factory or (lambda api_key: OpenAIClient(api_key=api_key))
        self.api_key_provider = api_key_provider
        self.clock = clock

    # ------------------------------------------------------------------
    # gates
    # ------------------------------------------------------------------

    def check_rate_limit(self, caller: str) -> None:
        if not self.rate_limiter.allow(caller):
            raise RateLimited(detail="Rate limit exceeded")

    def require_api_key(self) -> str:
        api_key = self.api_key_provider()
        if not api_key:
            raise MisconfiguredServer(detail="OpenAI API key not configured")
        return api_key

    def parse_request(self, payload: Any) -> AnalysisRequest:
        """Turn the decoded JSON body into a validated ``AnalysisRequest``."""
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise InvalidInput(
                "Solicitud inválida: se esperaba un objeto JSON",
                detail=f"Body is {type(payload).__name__}, expected object",
            )
        try:
            req = AnalysisRequest.model_validate(payload)
        except ValidationError as exc:
            fields = ", ".join(
                ".".join(str(p) for p in err["loc"]) for err in exc.errors()
            )
            raise InvalidInput(
                f"Solicitud inválida: revisa los campos {fields}",
                detail=f"Invalid request body: {exc}",
            )
        validate_transcript(req.raw_transcript)
        return req

    # ------------------------------------------------------------------
    # dispatch
    # ------------------------------------------------------------------

    def analyze(self, req: AnalysisRequest, api_key: str) -> Dict[str, Any]:
        """Call the provider for an already validated request (blocking)."""
        meeting = req.meeting_info.with_defaults()
        transcript = req.raw_transcript
        fecha = format_fecha_cl(self.clock() if self.clock else None)

        prompt = select_prompt(
            req.analysis_section,
            transcript,
            meeting,
            fecha=fecha,
            audio_url=req.audio_url,
        )
        max_tokens = max_tokens_for(transcript)
        log.info(
            "Dispatching section=%s transcript_chars=%d max_tokens=%d",
            prompt.section,
            len(transcript),
            max_tokens,
        )

        client = self.client_factory(api_key)
        completion = client.complete(
            prompt.system_prompt,
            prompt.user_prompt,
            max_tokens=max_tokens,
            temperature=ANALYSIS_TEMPERATURE,
        )
        log.info("Provider usage: %s", completion.usage.to_dict())

        markdown = completion.content or NO_MODEL_OUTPUT
        return AnalysisResult(
            meetingTitle=meeting.title,
            fechaCL=fecha,
            markdown=markdown,
            insights=markdown,
            section=prompt.section,
        ).model_dump()

    async def handle(
        self,
        caller: str,
        read_body: Callable[[], Awaitable[Any]],
        method: str = "POST",
        path: str = INSIGHTS_PATH,
    ) -> Tuple[int, Dict[str, Any]]:
        """Run every gate for one request and return ``(status, body)``."""
        try:
            self.check_rate_limit(caller)
            api_key = self.require_api_key()
            payload = await read_body()
            req = self.parse_request(payload)
            result = await run_in_threadpool(self.analyze, req, api_key)
        except InsightsError as exc:
            self.request_logger.log_request(caller, method, path, exc.status_code, exc.detail)
            return exc.status_code, ErrorResult(error=exc.public_message).model_dump()
        except Exception as exc:
            log.exception("Unhandled error while serving %s %s", method, path)
            # the exception text reaches the caller as-is
            message = str(exc) or INTERNAL_ERROR
            self.request_logger.log_request(caller, method, path, 500, message)
            return 500, ErrorResult(error=message).model_dump()

        self.request_logger.log_request(caller, method, path, 200)
        return 200, result


_dispatcher: Optional[InsightsDispatcher] = None


def get_dispatcher() -> InsightsDispatcher:
    """FastAPI dependency returning the process-wide dispatcher."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = InsightsDispatcher()
    return _dispatcher


__all__ = [
    "InsightsDispatcher",
    "get_dispatcher",
    "validate_transcript",
    "INSIGHTS_PATH",
    "NO_MODEL_OUTPUT",
    "TRANSCRIPT_TOO_SHORT",
    "TRANSCRIPT_TOO_LONG",
]
