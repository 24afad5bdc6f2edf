"""Error taxonomy for the insights endpoint.

Each error carries the HTTP status and the user-facing (Spanish) message
returned in the ``{"ok": false, "error": ...}`` envelope. ``detail`` is for
logs only and is never sent to the caller.
"""
from __future__ import annotations

from typing import Optional


class InsightsError(Exception):
    """Base class for terminal, non-retried request failures."""

    status_code: int = 500
    public_message: str = "Error interno del servidor"

    def __init__(self, public_message: Optional[str] = None, detail: Optional[str] = None):
        self.public_message = public_message or self.public_message
        self.detail = detail or self.public_message
        super().__init__(self.detail)


class RateLimited(InsightsError):
    status_code = 429
    public_message = "Demasiadas solicitudes. Intenta nuevamente en 1 minuto."


class MisconfiguredServer(InsightsError):
    status_code = 500
    public_message = "Configuración del servidor incompleta"


class InvalidInput(InsightsError):
    status_code = 400
    public_message = "Solicitud inválida"


class ProviderError(InsightsError):
    """Non-2xx answer from the LLM provider."""

    status_code = 500
    public_message = "Error al procesar con OpenAI"

    def __init__(self, provider_status: int, body: str):
        self.provider_status = provider_status
        self.body = body
        super().__init__(detail=f"OpenAI API Error ({provider_status}): {body}")


__all__ = [
    "InsightsError",
    "RateLimited",
    "MisconfiguredServer",
    "InvalidInput",
    "ProviderError",
]
