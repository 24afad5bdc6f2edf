"""Centralized configuration for the MeetingIntel service.

This module contains all default settings, limits, and model configuration
to avoid hardcoded values scattered across the codebase.
"""
import os
from pathlib import Path

# Try to load .env file from project root
try:
    from dotenv import load_dotenv
    env_path = Path(__file__).resolve().parents[1] / ".env"
    load_dotenv(env_path)
except ImportError:
    pass

# Provider Configuration
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TIMEOUT_SECONDS = float(os.getenv("OPENAI_TIMEOUT_SECONDS", "300"))

# Generation Configuration
ANALYSIS_TEMPERATURE = 0.2
DEFAULT_MAX_TOKENS = 4000
LONG_TRANSCRIPT_MAX_TOKENS = 8000
# Character count above which the larger output budget is requested
LONG_TRANSCRIPT_THRESHOLD = 200_000

# Transcript validation
MIN_TRANSCRIPT_LENGTH = 50
MAX_TRANSCRIPT_LENGTH = 1_000_000

# Locale
TIMEZONE = "America/Santiago"

# Rate limiting (limits notation, e.g. "10/minute")
RATE_LIMIT_INSIGHTS = os.getenv("RATE_LIMIT_INSIGHTS", "10/minute")
RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")
RATE_LIMIT_STORAGE_URI = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")

# Deployment
APP_ENV = os.getenv("APP_ENV", "development").lower()
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]


def get_openai_api_key():
    """Return the provider credential, read at call time so rotation needs no restart."""
    return os.getenv("OPENAI_API_KEY") or None
