"""Abstract base class for LLM clients.

The dispatcher talks to this thin interface only, so tests and alternative
OpenAI-compatible backends can be swapped in without touching it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class UsageStats:
    """Token usage reported by the provider for one completion."""
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    model: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.total_tokens,
            "model": self.model,
        }


@dataclass
class Completion:
    """Result of a chat completion call.

    ``content`` is None when the provider answered successfully but the
    payload did not have the expected shape.
    """
    content: Optional[str]
    usage: UsageStats = field(default_factory=UsageStats)
    model: str = ""


class LLMClient(ABC):
    """Minimal contract that all chat-completion backends must satisfy."""

    default_model: Optional[str]

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
        max_tokens: int = 512,
        temperature: float = 0.0,
    ) -> Completion:
        """Send one system + user exchange and return the first choice."""


__all__ = ["LLMClient", "UsageStats", "Completion"]
