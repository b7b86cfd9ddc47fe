"""Gemini generateContent response dataclasses.

WHY: The API returns nested JSON (candidates → content → parts). Typed
dataclasses make the one path the reader cares about explicit and keep
dict-walking out of the client.

HOW: from_dict() factories parse raw response dicts. Only the fields the
reader uses are kept.

RULES:
- A response may have zero candidates (blocked prompt); text is then ""
- Candidate text is the concatenation of all text parts, in order
- Unknown fields are ignored
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Candidate:
    """One generated answer.

    RULES:
    - text: all "text" parts joined without separator
    - finish_reason: e.g. "STOP", "MAX_TOKENS", "SAFETY", or None
    """

    text: str
    finish_reason: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> Candidate:
        parts = (data.get("content") or {}).get("parts") or []
        return cls(
            text="".join(p.get("text", "") for p in parts),
            finish_reason=data.get("finishReason"),
        )


@dataclass
class GenerateContentResponse:
    """Parsed body of POST models/{model}:generateContent."""

    candidates: list[Candidate] = field(default_factory=list)
    block_reason: str | None = None

    @property
    def text(self) -> str:
        """Text of the first candidate, or "" when there is none."""
        if not self.candidates:
            return ""
        return self.candidates[0].text

    @classmethod
    def from_dict(cls, data: dict) -> GenerateContentResponse:
        feedback = data.get("promptFeedback") or {}
        return cls(
            candidates=[Candidate.from_dict(c) for c in data.get("candidates") or []],
            block_reason=feedback.get("blockReason"),
        )
