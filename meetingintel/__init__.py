"""MeetingIntel Agent: turn meeting transcripts into structured Markdown reports.

Modules grouped by responsibility:
- prompts / prompt_builder: section prompt templates and their selection
- insights: the request dispatcher behind ``POST /api/insights``
- openai_client: chat-completions client for the LLM provider
- rate_limit: per-caller fixed-window limits
- present: consolidated report assembly
"""

__version__ = "0.1.0"
