"""Pydantic request/response models shared across routers."""
from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator

DEFAULT_TITLE = "Reunión con Prospecto"
DEFAULT_TYPE = "prospecto"
DEFAULT_DURATION = "desconocida"


class MeetingInfo(BaseModel):
    title: Optional[str] = None
    type: Optional[str] = None
    duration: Optional[Union[str, int, float]] = None
    participants: Optional[List[str]] = None

    def with_defaults(self) -> "MeetingInfo":
        """Copy with display defaults for every blank field."""
        return MeetingInfo(
            title=self.title or DEFAULT_TITLE,
            type=self.type or DEFAULT_TYPE,
            duration=str(self.duration) if self.duration else DEFAULT_DURATION,
            participants=list(self.participants or []),
        )


class AnalysisRequest(BaseModel):
    raw_transcript: str = ""
    meeting_info: MeetingInfo = Field(default_factory=MeetingInfo)
    audio_url: Optional[str] = None
    analysis_section: Optional[str] = None

    @field_validator("meeting_info", mode="before")
    @classmethod
    def _null_meeting_info(cls, value):
        return {} if value is None else value

    @field_validator("raw_transcript", mode="before")
    @classmethod
    def _null_transcript(cls, value):
        return "" if value is None else value


class AnalysisResult(BaseModel):
    """Success envelope of ``POST /api/insights``."""

    ok: bool = True
    meetingTitle: str
    fechaCL: str
    markdown: str
    insights: str
    section: str


class ErrorResult(BaseModel):
    ok: bool = False
    error: str


class ConsolidatedReportRequest(BaseModel):
    sections: Dict[str, Optional[str]] = Field(default_factory=dict)
    meeting_info: MeetingInfo = Field(default_factory=MeetingInfo)

    @field_validator("sections", mode="before")
    @classmethod
    def _null_sections(cls, value):
        return {} if value is None else value

    @field_validator("meeting_info", mode="before")
    @classmethod
    def _null_meeting_info(cls, value):
        return {} if value is None else value
