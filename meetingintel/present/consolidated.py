"""Consolidated report: stitch per-section Markdown into one document.

No model call is involved. Each section keeps its own content; heading lines
that repeat the section title are dropped so the consolidated headings are not
duplicated.
"""
from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional
from zoneinfo import ZoneInfo

from meetingintel.config import TIMEZONE

NOT_AVAILABLE = "*No disponible - Ejecute el análisis correspondiente primero*"

_MONTHS_ES = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)

# (section key, consolidated heading, title repeated inside the section)
REQUIRED_SECTIONS = (
    ("overview", "## 📋 RESUMEN EJECUTIVO", "resumen ejecutivo"),
    ("ice", "## 🎯 ANÁLISIS ICE SCORING", "ice scoring"),
    ("roi", "## 💰 ANÁLISIS ROI", "roi analysis"),
    ("insights", "## 🔍 INSIGHTS ESTRATÉGICOS", "strategic insights"),
    ("followup", "## 📅 PLAN DE SEGUIMIENTO", "follow-up plan"),
)
OPTIONAL_SECTIONS = (
    ("energy", "## ⚡ DASHBOARD DE ENERGÍA Y CONVERSIÓN", "dashboard de energía"),
    ("deck", "## 🖥️ DECK COMERCIAL", "commercial deck"),
)


def format_long_date(now: Optional[datetime] = None) -> str:
    """e.g. ``19 de octubre de 2026`` in the service timezone."""
    tz = ZoneInfo(TIMEZONE)
    moment = now.astimezone(tz) if now is not None else datetime.now(tz)
    return f"{moment.day} de {_MONTHS_ES[moment.month - 1]} de {moment.year}"


def clean_section(content: Optional[str], section_title: str) -> str:
    """Drop heading lines mentioning ``section_title``; placeholder if empty."""
    if not content or not content.strip():
        return NOT_AVAILABLE
    title = section_title.lower()
    kept = []
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped.startswith("#") and title in stripped.lstrip("#").strip().lower():
            continue
        kept.append(line)
    return "\n".join(kept).strip() or NOT_AVAILABLE


def build_consolidated_report(
    sections: Mapping[str, Optional[str]],
    meeting_title: str,
    meeting_type: str,
    now: Optional[datetime] = None,
) -> str:
    parts = [
        "# 📊 REPORTE CONSOLIDADO - ANÁLISIS ESTRATÉGICO\n\n"
        "## 📋 Información del Reporte\n\n"
        f"**📅 Fecha de Generación:** {format_long_date(now)}  \n"
        f"**🏢 Cliente:** {meeting_title}  \n"
        f"**📋 Tipo de Reunión:** {meeting_type.capitalize()}  \n"
        "**🤖 Analista:** MeetingIntel Agent  ",
    ]

    blocks = [
        f"{heading}\n\n{clean_section(sections.get(key), title)}"
        for key, heading, title in REQUIRED_SECTIONS
    ]
    blocks.extend(
        f"{heading}\n\n{clean_section(sections.get(key), title)}"
        for key, heading, title in OPTIONAL_SECTIONS
        if sections.get(key)
    )
    parts.extend(blocks)
    parts.append("*📊 Reporte generado automáticamente por MeetingIntel Agent*")
    return "\n\n---\n\n".join(parts) + "\n"


__all__ = [
    "NOT_AVAILABLE",
    "build_consolidated_report",
    "clean_section",
    "format_long_date",
]
