"""Prompt selection for the insights endpoint.

``select_prompt`` picks a fixed system/user pair per analysis section. Known
sections get their Markdown skeleton followed by the transcript; anything
else (no section, or an unrecognized key) gets the "full report" pair, whose
user prompt is assembled with ``PromptBuilder``.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo

from meetingintel.config import (
    DEFAULT_MAX_TOKENS,
    LONG_TRANSCRIPT_MAX_TOKENS,
    LONG_TRANSCRIPT_THRESHOLD,
    TIMEZONE,
)
from meetingintel.models import MeetingInfo
from meetingintel.prompts import (
    FULL_REPORT_INSTRUCTION,
    FULL_REPORT_SYSTEM,
    SECTION_PROMPTS,
)

FULL_REPORT = "full"


@dataclass(frozen=True)
class PromptPair:
    system_prompt: str
    user_prompt: str
    section: str = FULL_REPORT


class PromptBuilder:
    """Composable builder that renders N named parts into a single prompt.

    Usage:
      pb = PromptBuilder(raw_transcript=text)
      pb.add_part("meeting_info", block)
      prompt = pb.build(instruction="...")

    Each part is rendered as ``label: text`` and parts are separated by a
    blank line, in insertion order. The instruction, if any, closes the prompt.
    """

    def __init__(self, **parts: str):
        self.parts: List[Tuple[str, str]] = []
        for name, text in parts.items():
            self.add_part(name, text)

    def add_part(self, name: str, text: str) -> None:
        self.parts.append((name.strip(), text))

    def extend_parts(self, items: List[Tuple[str, str]]) -> None:
        """Add multiple named parts preserving order."""
        for name, text in items:
            self.add_part(name, text)

    def build(self, instruction: Optional[str] = None) -> str:
        blocks = [f"{label}: {text}" for label, text in self.parts]
        if instruction:
            blocks.append(instruction)
        return "\n\n".join(blocks)


def format_fecha_cl(now: Optional[datetime] = None) -> str:
    """Render a timestamp the way es-CL locales do, in the service timezone."""
    tz = ZoneInfo(TIMEZONE)
    moment = now.astimezone(tz) if now is not None else datetime.now(tz)
    return moment.strftime("%d-%m-%Y, %H:%M:%S")


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def format_meeting_info(meeting: MeetingInfo, fecha: str) -> str:
    """Serialize meeting metadata as the brace block the full-report prompt expects."""
    participants = ", ".join(_quote(p) for p in meeting.participants or [])
    lines = [
        "{",
        f"  title: {_quote(meeting.title or '')},",
        f"  date: {_quote(fecha)},",
        f"  timezone: {_quote(TIMEZONE)},",
        f"  type: {_quote(meeting.type or '')},",
        f"  duration: {_quote(str(meeting.duration or ''))},",
        f"  participants: [{participants}]",
        "}",
    ]
    return "\n".join(lines)


def select_prompt(
    section: Optional[str],
    transcript: str,
    meeting: MeetingInfo,
    *,
    fecha: str,
    audio_url: Optional[str] = None,
) -> PromptPair:
    """Return the prompt pair for ``section``.

    Unknown section keys fall back to the full report on purpose, so older
    clients asking for a tab the server does not know still get an answer.
    """
    entry = SECTION_PROMPTS.get(section) if section else None
    if entry is not None:
        return PromptPair(
            system_prompt=entry["system"],
            user_prompt=f"{entry['template']}\n\nTranscripción: {transcript}",
            section=section,
        )

    parts = [("meeting_info", format_meeting_info(meeting, fecha))]
    if audio_url:
        parts.append(("audio_url", _quote(audio_url)))
    pb = PromptBuilder(raw_transcript=transcript)
    pb.extend_parts(parts)
    return PromptPair(
        system_prompt=FULL_REPORT_SYSTEM,
        user_prompt=pb.build(instruction=FULL_REPORT_INSTRUCTION),
        section=FULL_REPORT,
    )


def max_tokens_for(transcript: str) -> int:
    """Output budget: long transcripts get the larger one (character heuristic)."""
    if len(transcript) > LONG_TRANSCRIPT_THRESHOLD:
        return LONG_TRANSCRIPT_MAX_TOKENS
    return DEFAULT_MAX_TOKENS


__all__ = [
    "FULL_REPORT",
    "PromptPair",
    "PromptBuilder",
    "format_fecha_cl",
    "format_meeting_info",
    "select_prompt",
    "max_tokens_for",
]
