"""OpenAI chat-completions client.

Calls ``POST {OPENAI_BASE_URL}/chat/completions`` with ``requests`` and
bearer-token auth. One attempt per call: a non-2xx answer raises
``ProviderError`` carrying the raw body, and network failures propagate.

Configuration (environment variables):
    OPENAI_API_KEY          – required, read by the caller
    OPENAI_BASE_URL         – default ``https://api.openai.com/v1``
    OPENAI_MODEL            – default ``gpt-4o-mini``
    OPENAI_TIMEOUT_SECONDS  – default ``300``
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from meetingintel.config import OPENAI_BASE_URL, OPENAI_MODEL, OPENAI_TIMEOUT_SECONDS
from meetingintel.errors import ProviderError
from meetingintel.llm_base import Completion, LLMClient, UsageStats

LOG = logging.getLogger(__name__)


def _first_choice_content(data: Any) -> Optional[str]:
    """Return ``choices[0].message.content`` or None if the shape is off."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return content if isinstance(content, str) else None


def _usage_from(data: Any, model: str) -> UsageStats:
    usage = data.get("usage") if isinstance(data, dict) else None
    if not isinstance(usage, dict):
        return UsageStats(model=model)
    return UsageStats(
        input_tokens=usage.get("prompt_tokens", 0) or 0,
        output_tokens=usage.get("completion_tokens", 0) or 0,
        total_tokens=usage.get("total_tokens", 0) or 0,
        model=model,
    )


class OpenAIClient(LLMClient):
    """LLM client for the OpenAI (or any compatible) chat-completions API.

    Parameters
    ----------
    api_key : str
        Bearer token sent in the ``Authorization`` header.
    base_url : str | None
        API root (default ``OPENAI_BASE_URL`` env var).
    default_model : str | None
        Model name to use when none is provided per-call.
    timeout : float | None
        Seconds to wait for the provider before giving up.
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        default_model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        if not api_key:
            raise ValueError("api_key is required")
        self.api_key = api_key
        self.base_url = (base_url or OPENAI_BASE_URL).rstrip("/")
        self.default_model = default_model or OPENAI_MODEL
        self.timeout = timeout or OPENAI_TIMEOUT_SECONDS

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/chat/completions"

    def build_payload(
        self,
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
        max_tokens: int = 512,
        temperature: float = 0.0,
    ) -> Dict[str, Any]:
        return {
            "model": model or self.default_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
        max_tokens: int = 512,
        temperature: float = 0.0,
    ) -> Completion:
        payload = self.build_payload(
            system_prompt,
            user_prompt,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        LOG.debug(
            "POST %s model=%s max_tokens=%d", self.endpoint, payload["model"], max_tokens
        )
        resp = requests.post(
            self.endpoint,
            json=payload,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            timeout=self.timeout,
        )
        if not resp.ok:
            raise ProviderError(resp.status_code, resp.text)

        data = resp.json()
        model_used = data.get("model", payload["model"]) if isinstance(data, dict) else payload["model"]
        return Completion(
            content=_first_choice_content(data),
            usage=_usage_from(data, model_used),
            model=model_used,
        )


__all__ = ["OpenAIClient"]
