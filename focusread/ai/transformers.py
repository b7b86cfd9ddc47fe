"""Pluggable text transformers — the AI capability the reader depends on.

WHY: The reader's state machine only needs "text in, text out, or fail".
Putting that contract behind an abstract class keeps the controller and
its tests independent of Gemini, HTTP, and API keys.

HOW: TextTransformer is an ABC with a ``name`` and an async
``transform()``. RefineTransformer and SummarizeTransformer open a
GeminiClient per call and use its matching prompt. TRANSFORMERS maps the
action keys used by the CLI, GUI and HTTP API to these classes.

RULES:
- transform() returns non-empty text or raises TransformError
- A missing API key surfaces as TransformError, not ValueError
- Keys are snake_case action names ("refine", "summarize")
- Values are classes (not instances); instantiate with client kwargs
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from focusread.ai.client import GeminiClient, TransformError


class TextTransformer(ABC):
    """Abstract text → text capability.

    To add a new AI action:
    1. Subclass TextTransformer
    2. Implement name and transform()
    3. Register it in TRANSFORMERS
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable action name, e.g. 'Refine'."""

    @property
    def status_message(self) -> str:
        """Status shown while the transformation runs."""
        return "{}...".format(self.name)

    @abstractmethod
    async def transform(self, text: str) -> str:
        """Return the transformed text, or raise TransformError."""


class _GeminiTransformer(TextTransformer):
    """Shared plumbing: open a client, call one method, map config errors."""

    def __init__(self, **client_kwargs: Any) -> None:
        self._client_kwargs = client_kwargs

    def _open_client(self) -> GeminiClient:
        try:
            return GeminiClient(**self._client_kwargs)
        except ValueError as exc:
            # Missing API key
            raise TransformError(str(exc)) from exc

    async def transform(self, text: str) -> str:
        async with self._open_client() as client:
            return await self._call(client, text)

    @abstractmethod
    async def _call(self, client: GeminiClient, text: str) -> str:
        ...


class RefineTransformer(_GeminiTransformer):
    """Rewrite text for speed reading."""

    @property
    def name(self) -> str:
        return "Refine"

    @property
    def status_message(self) -> str:
        return "Refining text with AI..."

    async def _call(self, client: GeminiClient, text: str) -> str:
        return await client.refine_text(text)


class SummarizeTransformer(_GeminiTransformer):
    """Condense text to its essential points."""

    @property
    def name(self) -> str:
        return "Summarize"

    @property
    def status_message(self) -> str:
        return "Summarizing text with AI..."

    async def _call(self, client: GeminiClient, text: str) -> str:
        return await client.summarize_text(text)


TRANSFORMERS: dict[str, type[TextTransformer]] = {
    "refine": RefineTransformer,
    "summarize": SummarizeTransformer,
}
