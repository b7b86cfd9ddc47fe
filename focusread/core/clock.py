"""Playback clock: punctuation-aware delays that advance a reading session.

WHY: Words must appear at the chosen WPM, but a flat rate runs sentences
together. Pausing longer after sentence and clause punctuation gives the
reader time to close each thought, which keeps comprehension up at high
speeds.

HOW: PlaybackClock subscribes to a ReadingSession. Whenever the session
publishes a change it cancels its pending wait (if any) and, if the
session is playing, schedules exactly one new wait for the current word.
When the wait fires it calls session.advance(); the resulting change
notification re-arms the clock for the next word, and so on until the
session stops playing.

RULES:
- base delay = 60000 / speed milliseconds
- last character in ". ! ?" → base × 2.2; in ", ; :" → base × 1.6
- Only the last character counts ('end."' gets no pause)
- At most one pending wait per clock; always cancel before scheduling
- A cancelled wait never calls advance()
- close() cancels the pending wait and detaches from the session
"""

from __future__ import annotations

import logging

from focusread.core.scheduler import ScheduledCall, Scheduler
from focusread.core.session import ReadingSession, SessionSnapshot

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60_000

SENTENCE_TERMINALS = frozenset(".!?")
CLAUSE_TERMINALS = frozenset(",;:")

SENTENCE_PAUSE_MULTIPLIER = 2.2
CLAUSE_PAUSE_MULTIPLIER = 1.6


def base_delay_ms(speed: int) -> float:
    """Milliseconds per word at ``speed`` WPM, before punctuation pauses."""
    return MS_PER_MINUTE / speed


def punctuation_multiplier(text: str) -> float:
    """Pause factor for a word, from its last character only.

    RULES:
    - ". ! ?" → SENTENCE_PAUSE_MULTIPLIER
    - ", ; :" → CLAUSE_PAUSE_MULTIPLIER
    - anything else (including empty text) → 1.0
    """
    last = text[-1:]
    if last in SENTENCE_TERMINALS:
        return SENTENCE_PAUSE_MULTIPLIER
    if last in CLAUSE_TERMINALS:
        return CLAUSE_PAUSE_MULTIPLIER
    return 1.0


def compute_delay_ms(text: str, speed: int) -> float:
    """How long ``text`` stays on screen at ``speed`` WPM.

    Examples at 300 WPM: "word" → 200.0, "end." → 440.0, "pause," → 320.0.
    """
    return base_delay_ms(speed) * punctuation_multiplier(text)


class PlaybackClock:
    """Drives a ReadingSession forward while it is playing.

    WHY: The session only knows how to move one step; something has to
    decide when. Keeping timing out of the session lets the session stay
    free of event-loop concerns and lets tests swap in a virtual clock.

    HOW: The clock is a session listener. Every notification runs
    _rearm(): cancel the pending call, then schedule a new one only if the
    session is playing. Speed changes, toggles and reloads therefore
    always replace the outstanding wait rather than adding another.

    RULES:
    - Construct with the session and a Scheduler; arming starts at once
      if the session is already playing
    - The delay is recomputed from the current word and speed every step
    - After close() the clock never touches the session again
    """

    def __init__(self, session: ReadingSession, scheduler: Scheduler) -> None:
        self._session = session
        self._scheduler = scheduler
        self._pending: ScheduledCall | None = None
        self._closed = False
        self._unsubscribe = session.subscribe(self._on_change)
        self._rearm()

    @property
    def pending(self) -> bool:
        """True while a wait is scheduled and not yet fired or cancelled."""
        return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def current_delay_ms(self) -> float | None:
        """Delay for the word under the cursor, or None when nothing is loaded."""
        word = self._session.current_word
        if word is None:
            return None
        return compute_delay_ms(word.text, self._session.speed)

    def close(self) -> None:
        """Cancel any pending wait and stop listening to the session."""
        if self._closed:
            return
        self._cancel()
        self._unsubscribe()
        self._closed = True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _on_change(self, snapshot: SessionSnapshot) -> None:
        if snapshot.words_changed:
            logger.debug("Word sequence replaced; pending wait cancelled")
        self._rearm()

    def _cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _rearm(self) -> None:
        self._cancel()
        if self._closed or not self._session.is_playing:
            return
        delay = self.current_delay_ms()
        if delay is None:
            return
        self._pending = self._scheduler.schedule_once(delay, self._fire)

    def _fire(self) -> None:
        self._pending = None
        if self._closed or not self._session.is_playing:
            return
        # advance() publishes, which re-arms through _on_change
        self._session.advance()
