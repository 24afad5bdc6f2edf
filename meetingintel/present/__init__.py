"""Presentation helpers that assemble section Markdown into documents."""
