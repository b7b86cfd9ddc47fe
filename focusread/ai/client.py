"""Async HTTP client for the Gemini text generation API.

WHY: The reader offers two optional AI actions on the loaded text:
"refine" (simplify for speed reading) and "summarize" (keep only the
essentials). Both are a single prompt → text round trip, so one small
client covers them.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. GeminiClient is an
async context manager — enter it to get an authenticated client, exit to
close the connection pool. generate() posts a prompt to
models/{model}:generateContent; refine_text() and summarize_text() wrap
it with the two reader prompts.

RULES:
- Always use the async context manager (async with GeminiClient(...) as client:)
- Auth is the x-goog-api-key header; the key comes from load_api_key()
- Non-2xx responses raise GeminiAPIError
- An unreadable, empty or blocked answer raises TransformError (the caller decides
  whether to keep the original text)
- Network failures are wrapped in TransformError
- No retries; the user can press the button again
"""

from __future__ import annotations

import logging

import httpx

from focusread.ai.models import GenerateContentResponse
from focusread.config import GEMINI_BASE_URL, GEMINI_MODEL, load_api_key

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

REFINE_PROMPT = """You are a text optimization expert. Refine the following text for speed reading (RSVP).
- Simplify complex sentence structures.
- Remove redundant filler words.
- Ensure high information density.
- Maintain the original meaning and tone.
- Return ONLY the optimized text.

TEXT:
{text}"""

SUMMARIZE_PROMPT = """Summarize the following text into a concise version suitable for rapid reading.
Keep only the essential points and narratives.

TEXT:
{text}"""


class TransformError(Exception):
    """Raised when an AI text transformation cannot produce usable text.

    WHY: The reader must never replace the user's text with an error
    string or an empty answer. A typed exception lets the controller keep
    the current session and show a short status instead.

    RULES:
    - message is human-readable and safe to show in the UI
    """


class GeminiAPIError(TransformError):
    """Raised when the Gemini API returns a non-2xx response.

    RULES:
    - Always include status_code and message
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Gemini API error {status_code}: {message}")


class GeminiClient:
    """Async client for Gemini's generateContent endpoint.

    RULES:
    - Use as: async with GeminiClient() as client: ...
    - api_key defaults to load_api_key() from .env
    - base_url / model default to GEMINI_BASE_URL / GEMINI_MODEL
    - transport is for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key or load_api_key()
        self._base_url = (base_url or GEMINI_BASE_URL).rstrip("/")
        self._model = model or GEMINI_MODEL
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def model(self) -> str:
        return self._model

    async def __aenter__(self) -> GeminiClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"x-goog-api-key": self._api_key},
            timeout=httpx.Timeout(120.0, connect=15.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "GeminiClient must be used as an async context manager: "
                "async with GeminiClient() as client: ..."
            )
        return self._client

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the generated text.

        HOW: POSTs {"contents": [{"parts": [{"text": prompt}]}]} and
        returns the first candidate's text, stripped.

        RULES:
        - Raises GeminiAPIError on non-2xx responses
        - Raises TransformError on transport errors, an unreadable body,
          or an empty answer

        Args:
            prompt: The full prompt text.

        Returns:
            The generated text, never empty.
        """
        client = self._ensure_client()
        logger.debug("Contacting %s", self._model)

        body = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            resp = await client.post(
                "/models/{}:generateContent".format(self._model), json=body
            )
        except httpx.HTTPError as exc:
            logger.warning("Gemini request failed: %s", exc)
            raise TransformError("Could not reach the AI service.") from exc

        if resp.status_code != 200:
            raise GeminiAPIError(resp.status_code, resp.text)

        try:
            parsed = GenerateContentResponse.from_dict(resp.json())
        except (ValueError, AttributeError, TypeError) as exc:
            # Not JSON, or JSON of the wrong shape (e.g. a proxy page)
            logger.warning("Unreadable Gemini response: %s", exc)
            raise TransformError("AI service returned an unreadable response.") from exc
        text = parsed.text.strip()
        if not text:
            reason = parsed.block_reason or "empty response"
            raise TransformError("AI service returned no text ({}).".format(reason))
        return text

    async def refine_text(self, text: str) -> str:
        """Rewrite ``text`` for speed reading (simpler, denser, same meaning)."""
        return await self.generate(REFINE_PROMPT.format(text=text))

    async def summarize_text(self, text: str) -> str:
        """Condense ``text`` to its essential points."""
        return await self.generate(SUMMARIZE_PROMPT.format(text=text))
