"""Pydantic request/response models for the HTTP API.

WHY: A browser front end needs the same segmentation, extraction and AI
actions as the desktop app. Typed schemas give request validation,
response serialization and OpenAPI documentation in one place.

HOW: Each endpoint pair (request + response) has its own model. Enums
represent the closed sets (transform actions). All models include Field
descriptions for rich OpenAPI docs.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Speeds are validated against SPEED_CHOICES, never clamped
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from focusread.config import DEFAULT_SPEED, SPEED_CHOICES

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TransformKind(str, Enum):
    """Available AI transform actions.

    RULES:
    - Values match keys in focusread.ai.transformers.TRANSFORMERS exactly
    """

    refine = "refine"
    summarize = "summarize"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SegmentRequest(BaseModel):
    """Text to split into pivot-aligned words."""

    text: str = Field(description="Raw text; may be empty.")
    speed: int = Field(
        default=DEFAULT_SPEED,
        description="Reading speed in WPM used for per-word delays. One of 300, 500, 700, 900.",
    )

    @field_validator("speed")
    @classmethod
    def _check_speed(cls, value: int) -> int:
        if value not in SPEED_CHOICES:
            raise ValueError(
                "speed must be one of {}".format(", ".join(str(s) for s in SPEED_CHOICES))
            )
        return value


class TransformRequest(BaseModel):
    """Text to send through an AI transform."""

    text: str = Field(min_length=1, description="Source text to refine or summarize.")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class WordModel(BaseModel):
    """One pivot-aligned word with its display delay."""

    text: str = Field(description="Original token.")
    prefix: str = Field(description="Characters before the pivot.")
    pivot: str = Field(description="The highlighted Optimal Recognition Point character.")
    suffix: str = Field(description="Characters after the pivot.")
    delay_ms: float = Field(description="How long the word stays on screen at the requested speed.")


class SegmentResponse(BaseModel):
    """Segmented words plus total reading time."""

    speed: int = Field(description="Speed the delays were computed for.")
    word_count: int = Field(description="Number of words.")
    total_ms: float = Field(description="Sum of all word delays in milliseconds.")
    words: List[WordModel] = Field(description="Words in reading order.")

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "speed": 300,
                "word_count": 2,
                "total_ms": 640.0,
                "words": [
                    {"text": "Hello,", "prefix": "H", "pivot": "e", "suffix": "llo,", "delay_ms": 320.0},
                    {"text": "RSVP", "prefix": "R", "pivot": "S", "suffix": "VP", "delay_ms": 200.0},
                ],
            }
        ]
    }}


class DocumentResponse(BaseModel):
    """Text extracted from an uploaded document."""

    filename: str = Field(description="Original uploaded filename.")
    text: str = Field(description="Extracted text with whitespace collapsed to single spaces.")
    word_count: int = Field(description="Number of words in the extracted text.")


class TransformResponse(BaseModel):
    """Result of an AI transform."""

    kind: TransformKind = Field(description="The transform that was applied.")
    text: str = Field(description="Transformed text.")
    word_count: int = Field(description="Number of words in the transformed text.")


class SpeedsResponse(BaseModel):
    """The fixed set of selectable reading speeds."""

    speeds: List[int] = Field(description="Selectable speeds in WPM, slowest first.")
    default: int = Field(description="Default speed in WPM.")


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
    ai_configured: Optional[bool] = Field(
        default=None,
        description="Whether a Gemini API key is configured.",
    )
