"""Tests for meetingintel.present.consolidated — pure logic, no mocking needed."""
from __future__ import annotations

from datetime import datetime, timezone

from meetingintel.present.consolidated import (
    NOT_AVAILABLE,
    build_consolidated_report,
    clean_section,
    format_long_date,
)


class TestCleanSection:

    def test_empty_gives_placeholder(self):
        assert clean_section("", "roi analysis") == NOT_AVAILABLE
        assert clean_section(None, "roi analysis") == NOT_AVAILABLE
        assert clean_section("  \n ", "roi analysis") == NOT_AVAILABLE

    def test_drops_heading_repeating_title(self):
        content = "## ROI Analysis\n\n### Oportunidades\n- ROI analysis detallado abajo"
        cleaned = clean_section(content, "roi analysis")
        assert "## ROI Analysis" not in cleaned
        assert cleaned.startswith("### Oportunidades")
        # body lines mentioning the title are kept
        assert "- ROI analysis detallado abajo" in cleaned

    def test_only_title_gives_placeholder(self):
        assert clean_section("# Strategic Insights", "strategic insights") == NOT_AVAILABLE


class TestFormatLongDate:

    def test_spanish_month(self):
        now = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)
        assert format_long_date(now) == "19 de octubre de 2026"

    def test_uses_santiago_day(self):
        # 02:00 UTC on Jan 1st is still Dec 31st in Santiago
        now = datetime(2026, 1, 1, 2, 0, tzinfo=timezone.utc)
        assert format_long_date(now) == "31 de diciembre de 2025"


class TestBuildConsolidatedReport:

    def test_sections_in_order(self):
        sections = {key: f"contenido {key}" for key in ("followup", "roi", "overview", "insights", "ice")}
        report = build_consolidated_report(sections, "ACME", "prospecto")
        positions = [report.index(f"contenido {key}") for key in ("overview", "ice", "roi", "insights", "followup")]
        assert positions == sorted(positions)

    def test_header_block(self):
        now = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)
        report = build_consolidated_report({}, "ACME", "prospecto", now=now)
        assert report.startswith("# 📊 REPORTE CONSOLIDADO")
        assert "**📅 Fecha de Generación:** 19 de octubre de 2026" in report
        assert "**🏢 Cliente:** ACME" in report
        assert "**📋 Tipo de Reunión:** Prospecto" in report
        assert "**🤖 Analista:** MeetingIntel Agent" in report

    def test_missing_required_sections_get_placeholder(self):
        report = build_consolidated_report({"overview": "hola"}, "ACME", "prospecto")
        assert report.count(NOT_AVAILABLE) == 4

    def test_optional_sections_only_when_present(self):
        without = build_consolidated_report({}, "ACME", "prospecto")
        assert "DECK COMERCIAL" not in without
        assert "ENERGÍA" not in without

        with_deck = build_consolidated_report({"deck": "### Slide 1"}, "ACME", "prospecto")
        assert "## 🖥️ DECK COMERCIAL" in with_deck
        assert "### Slide 1" in with_deck

    def test_sections_separated_by_rules(self):
        report = build_consolidated_report({}, "ACME", "prospecto")
        # header, five sections, footer
        assert report.count("\n\n---\n\n") == 6
