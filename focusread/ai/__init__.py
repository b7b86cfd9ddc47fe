"""AI text transformation package — optional refine/summarize actions.

WHY: Dense prose reads poorly at 700–900 WPM. Rewriting or condensing it
first is optional, so it lives behind an injectable capability the core
never imports.

HOW: client.py talks to Gemini over httpx, models.py parses its
responses, transformers.py adapts the client to the TextTransformer
interface the controller consumes.

RULES:
- All HTTP calls go through GeminiClient (no direct httpx usage elsewhere)
- Failures raise TransformError; callers keep the original text
"""

from focusread.ai.client import GeminiAPIError, GeminiClient, TransformError
from focusread.ai.transformers import (
    TRANSFORMERS,
    RefineTransformer,
    SummarizeTransformer,
    TextTransformer,
)

__all__ = [
    "GeminiAPIError",
    "GeminiClient",
    "RefineTransformer",
    "SummarizeTransformer",
    "TRANSFORMERS",
    "TextTransformer",
    "TransformError",
]
