"""Reader controller: one session, its clock, and the text-source actions.

WHY: Surfaces (terminal, desktop, tests) all need the same orchestration
around the core — keep the editable source text, run a document
extraction or AI action without corrupting the current session on
failure, and show a short-lived status message. Doing it once here keeps
each surface a thin view.

HOW: ReaderController owns a ReadingSession and a PlaybackClock bound to
the caller's Scheduler. Collaborator actions follow a three-step
lifecycle — begin_task() → complete_task(text) | fail_task(message) —
which load_document() and apply_transform() wrap for the common cases.
Error statuses clear themselves after STATUS_MESSAGE_TTL_MS through the
same scheduler.

RULES:
- Only one collaborator action at a time; a second begin_task() raises
  ReaderBusyError
- A failed action leaves words, cursor and play state untouched
- Every action ends in complete_task() or fail_task(), even when the
  collaborator raises something unexpected (which is then re-raised)
- A successful action replaces the session via load_text() (stopped, at 0)
- A result for text that was replaced meanwhile is discarded by
  complete_task(text, source=...)
- Never retries automatically
- close() cancels every pending timer (playback and status)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Optional, Union

from focusread.ai.client import TransformError
from focusread.ai.transformers import TextTransformer
from focusread.config import DEFAULT_SPEED, STATUS_MESSAGE_TTL_MS
from focusread.core.clock import PlaybackClock
from focusread.core.scheduler import ScheduledCall, Scheduler
from focusread.core.session import ReadingSession, SessionSnapshot
from focusread.sources.documents import DocumentExtractionError, load_document

logger = logging.getLogger(__name__)

StatusListener = Callable[[Optional[str]], None]


class ReaderBusyError(RuntimeError):
    """Raised when a collaborator action starts while another is running."""


class ReaderController:
    """Coordinates a reading session with its text sources and status line.

    RULES:
    - scheduler drives both playback and status expiry
    - status listeners receive the new message, or None when it clears
    - source_text is what the user sees in the text box; the session's
      words are always segmented from it
    """

    def __init__(
        self,
        scheduler: Scheduler,
        text: str = "",
        speed: int = DEFAULT_SPEED,
        status_ttl_ms: float = STATUS_MESSAGE_TTL_MS,
    ) -> None:
        self._scheduler = scheduler
        self._source_text = text
        self._session = ReadingSession(text, speed=speed)
        self._clock = PlaybackClock(self._session, scheduler)
        self._status_ttl_ms = status_ttl_ms
        self._status_message: Optional[str] = None
        self._status_expiry: Optional[ScheduledCall] = None
        self._status_listeners: list[StatusListener] = []
        self._is_processing = False

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def session(self) -> ReadingSession:
        return self._session

    @property
    def clock(self) -> PlaybackClock:
        return self._clock

    @property
    def source_text(self) -> str:
        return self._source_text

    @property
    def is_processing(self) -> bool:
        return self._is_processing

    @property
    def status_message(self) -> Optional[str]:
        return self._status_message

    def word_counter(self) -> str:
        """Queue label, e.g. "3 OF 120 WORDS"."""
        count = len(self._session.words)
        position = self._session.current_index + 1 if count else 0
        return "{} OF {} WORDS".format(position, count)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Callable[[SessionSnapshot], None]) -> Callable[[], None]:
        """Subscribe to session snapshots (word, progress, play state)."""
        return self._session.subscribe(listener)

    def subscribe_status(self, listener: StatusListener) -> Callable[[], None]:
        """Subscribe to status message changes."""
        self._status_listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._status_listeners:
                self._status_listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Playback passthroughs
    # ------------------------------------------------------------------

    def toggle_play(self) -> None:
        self._session.toggle_play()

    def reset(self) -> None:
        self._session.reset()

    def set_speed(self, value: int) -> None:
        self._session.set_speed(value)

    # ------------------------------------------------------------------
    # Text sources
    # ------------------------------------------------------------------

    def load_text(self, text: str) -> None:
        """Replace the source text and re-segment the session from it."""
        self._source_text = text
        self._session.load_text(text)
        logger.info("Loaded text (%d words)", len(self._session.words))

    def begin_task(self, message: str) -> None:
        """Mark a collaborator action as running and show ``message``.

        Raises:
            ReaderBusyError: If another action is still running.
        """
        if self._is_processing:
            raise ReaderBusyError("Another action is still in progress.")
        self._is_processing = True
        self._set_status(message, transient=False)

    def complete_task(self, text: str, source: Optional[str] = None) -> bool:
        """Finish the running action and load its text.

        RULES:
        - source is the text the action started from; if the user has
          loaded other text since, the result is discarded and the task
          fails instead

        Returns:
            True if ``text`` was loaded, False if it was discarded.
        """
        if source is not None and source != self._source_text:
            self.fail_task("Text changed meanwhile; result discarded.")
            return False
        self._is_processing = False
        self._set_status(None)
        self.load_text(text)
        return True

    def fail_task(self, message: str) -> None:
        """Finish the running action with a transient error message.

        The session is not touched.
        """
        self._is_processing = False
        self._set_status(message, transient=True)

    def load_document(self, path: Union[str, Path]) -> bool:
        """Extract text from a document and load it.

        Returns:
            True if the document was loaded, False if extraction failed
            (the status message explains why).
        """
        path = Path(path)
        self.begin_task("Extracting text from {}...".format(path.name))
        try:
            text = load_document(path)
        except DocumentExtractionError as exc:
            logger.warning("Could not load %s: %s", path, exc)
            self.fail_task(str(exc))
            return False
        except Exception:
            logger.exception("Unexpected error loading %s", path)
            self.fail_task("Error reading document.")
            raise
        return self.complete_task(text)

    async def apply_transform(self, transformer: TextTransformer) -> bool:
        """Run an AI transformation on the current source text.

        HOW: Captures the source text, awaits the transformer, and loads
        the result only if the source text is still the one that was sent.

        Returns:
            True if the transformed text was loaded, False otherwise.
        """
        source = self._source_text
        if not source.strip():
            self._set_status("Nothing to {}.".format(transformer.name.lower()), transient=True)
            return False

        self.begin_task(transformer.status_message)
        try:
            result = await transformer.transform(source)
        except TransformError as exc:
            logger.warning("%s failed: %s", transformer.name, exc)
            self.fail_task("{} failed: {}".format(transformer.name, exc))
            return False
        except Exception:
            logger.exception("%s failed unexpectedly", transformer.name)
            self.fail_task("{} failed unexpectedly.".format(transformer.name))
            raise

        return self.complete_task(result, source=source)

    def close(self) -> None:
        """Stop the clock and cancel the status timer."""
        self._clock.close()
        self._cancel_status_expiry()
        self._status_listeners.clear()

    # ------------------------------------------------------------------
    # Status line
    # ------------------------------------------------------------------

    def _cancel_status_expiry(self) -> None:
        if self._status_expiry is not None:
            self._status_expiry.cancel()
            self._status_expiry = None

    def _set_status(self, message: Optional[str], transient: bool = False) -> None:
        self._cancel_status_expiry()
        self._status_message = message
        if message is not None and transient:
            self._status_expiry = self._scheduler.schedule_once(
                self._status_ttl_ms, self._expire_status
            )
        for listener in list(self._status_listeners):
            listener(message)

    def _expire_status(self) -> None:
        self._status_expiry = None
        self._status_message = None
        for listener in list(self._status_listeners):
            listener(None)
