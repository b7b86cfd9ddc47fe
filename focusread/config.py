"""Configuration constants, speed choices, and .env loading.

WHY: Centralizes every tunable value (speeds, default text, status timing,
Gemini endpoint) so they are easy to find and override without touching
the reading logic.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level tuples, sets, and strings. load_api_key() gives a clear
error when the Gemini key is missing.

RULES:
- SPEED_CHOICES is a closed set; nothing else is a valid reading speed
- DEFAULT_SPEED must be one of SPEED_CHOICES (checked at import)
- API key is loaded from .env via python-dotenv, never hardcoded
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the app is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Reading speed
# ---------------------------------------------------------------------------

SPEED_CHOICES: tuple[int, ...] = (300, 500, 700, 900)
"""Selectable words-per-minute values, slowest first."""

DEFAULT_SPEED = int(os.getenv("FOCUSREAD_DEFAULT_SPEED", "300"))
if DEFAULT_SPEED not in SPEED_CHOICES:
    raise ValueError(
        "FOCUSREAD_DEFAULT_SPEED must be one of {}, got {}".format(
            ", ".join(str(s) for s in SPEED_CHOICES), DEFAULT_SPEED
        )
    )

# ---------------------------------------------------------------------------
# Reader surface defaults
# ---------------------------------------------------------------------------

DEFAULT_TEXT = (
    "Speed reading is a set of techniques intended to improve a person's "
    "ability to read quickly. Rapid Serial Visual Presentation (RSVP) is one "
    "such method. It involves displaying words in a single location at a "
    "fixed speed, which eliminates the time spent on eye movements between "
    "words. By focusing on a single point and highlighting the 'pivot' letter "
    "of each word, readers can significantly increase their words-per-minute "
    "rate while maintaining or even improving comprehension. This application "
    "allows you to practice this skill with varying speeds by uploading your "
    "own PDFs or pasting text below."
)

STATUS_MESSAGE_TTL_MS = int(os.getenv("FOCUSREAD_STATUS_TTL_MS", "3000"))
"""How long a transient error message stays visible."""

SUPPORTED_DOCUMENT_FORMATS: set[str] = {".pdf", ".txt"}
"""Document extensions the extraction collaborator accepts (lowercase, with dot)."""

# ---------------------------------------------------------------------------
# Gemini configuration defaults
# ---------------------------------------------------------------------------

GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")


def load_api_key() -> str:
    """Load the Gemini API key from the environment.

    WHY: Refinement and summarization call the Gemini API, which needs a
    key. Loading it from the environment keeps it out of source code.

    HOW: Reads GEMINI_API_KEY, falling back to API_KEY (the name the web
    build used).

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("GEMINI_API_KEY", "").strip() or os.getenv("API_KEY", "").strip()
    if not key:
        raise ValueError(
            "Gemini API key not configured. "
            "Add GEMINI_API_KEY to the .env file in the app folder."
        )
    return key
