"""Reading session state machine: word list, cursor, play/pause, speed.

WHY: Every surface (terminal, desktop, tests) needs the same answers to
"which word is showing, are we playing, how far along are we". Keeping
that state in one object with a handful of named transitions makes the
invariants enforceable in one place instead of in every caller.

HOW: ReadingSession holds the fields and exposes the transitions
load_text(), toggle_play(), reset(), set_speed() and advance(). After
each transition it publishes an immutable SessionSnapshot to subscribers
(the playback clock and any display). The session never schedules or
performs I/O itself.

RULES:
- current_index is always 0 <= current_index < max(1, len(words))
- load_text() replaces words wholesale, resets the cursor, stops playback
- toggle_play() has no effect while words is empty
- advance() at the last index stops playback and leaves the cursor there
- speed is always a member of Speed; anything else raises InvalidSpeedError
- Subscribers are notified after every transition, in subscription order
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

from focusread.config import DEFAULT_SPEED
from focusread.core.words import WordRecord, segment

logger = logging.getLogger(__name__)


class InvalidSpeedError(ValueError):
    """Raised when a speed outside the fixed WPM choices is requested.

    WHY: The speed set is closed and known in advance. An unknown value is
    a programming error in the caller, so it fails fast instead of being
    clamped to something nearby.
    """


class Speed(int, enum.Enum):
    """Selectable reading speeds in words per minute.

    HOW: Inherits from int so values compare and serialize as plain WPM.
    """

    WPM_300 = 300
    WPM_500 = 500
    WPM_700 = 700
    WPM_900 = 900

    @classmethod
    def parse(cls, value: int) -> Speed:
        """Return the member for ``value``, raising InvalidSpeedError otherwise."""
        # bool is an int subclass; True must not pass as a speed
        if isinstance(value, bool):
            raise InvalidSpeedError("Invalid speed {!r}".format(value))
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(str(s.value) for s in cls)
            raise InvalidSpeedError(
                "Invalid speed {!r}. Allowed values: {}".format(value, allowed)
            ) from None


class SessionState(str, enum.Enum):
    """Observable phase of a reading session.

    RULES:
    - idle: no words loaded
    - playing: the clock is scheduling advancement
    - paused: words loaded, not playing
    - finished: playback ran off the last word by itself; behaves like paused
    """

    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class SessionSnapshot:
    """What a display needs to render the session at one instant.

    RULES:
    - word is None when no words are loaded
    - progress is 0–100; 0 when fewer than two words are loaded
    - words_changed is True only for the snapshot published by load_text()
    """

    word: WordRecord | None
    current_index: int
    word_count: int
    is_playing: bool
    speed: Speed
    state: SessionState
    progress: float
    words_changed: bool = False


Listener = Callable[[SessionSnapshot], None]


def compute_progress(current_index: int, word_count: int) -> float:
    """Percentage of the way from the first to the last word.

    RULES:
    - word_count <= 1 → 0 (nothing to progress through)
    - Otherwise current_index / (word_count - 1) * 100
    """
    if word_count <= 1:
        return 0.0
    return current_index / (word_count - 1) * 100


class ReadingSession:
    """The mutable state governing playback of one loaded text.

    WHY: A single owner for words, cursor, play flag and speed keeps the
    invariants in one place and gives the clock one thing to observe.

    HOW: Fields are private; read them through properties and change them
    only through the transition methods. Each transition ends with
    _publish(), which hands a fresh SessionSnapshot to every listener.

    RULES:
    - Single-threaded: call from the owning event loop only
    - words is a tuple, never patched in place
    - _finished is set only by advance() running off the end
    """

    def __init__(self, text: str = "", speed: int = DEFAULT_SPEED) -> None:
        self._words: tuple[WordRecord, ...] = tuple(segment(text))
        self._current_index = 0
        self._is_playing = False
        self._finished = False
        self._speed = Speed.parse(speed)
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def words(self) -> tuple[WordRecord, ...]:
        return self._words

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def speed(self) -> Speed:
        return self._speed

    @property
    def current_word(self) -> WordRecord | None:
        """The word under the cursor, or None when nothing is loaded."""
        if not self._words:
            return None
        return self._words[self._current_index]

    @property
    def progress(self) -> float:
        return compute_progress(self._current_index, len(self._words))

    @property
    def state(self) -> SessionState:
        if not self._words:
            return SessionState.IDLE
        if self._is_playing:
            return SessionState.PLAYING
        if self._finished:
            return SessionState.FINISHED
        return SessionState.PAUSED

    def snapshot(self, words_changed: bool = False) -> SessionSnapshot:
        return SessionSnapshot(
            word=self.current_word,
            current_index=self._current_index,
            word_count=len(self._words),
            is_playing=self._is_playing,
            speed=self._speed,
            state=self.state,
            progress=self.progress,
            words_changed=words_changed,
        )

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener and return a callable that unregisters it.

        The listener is not called immediately; take snapshot() for the
        current state.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, words_changed: bool = False) -> None:
        snap = self.snapshot(words_changed=words_changed)
        # Copy so listeners may unsubscribe during notification
        for listener in list(self._listeners):
            listener(snap)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def load_text(self, text: str) -> None:
        """Re-segment ``text`` and replace the whole word sequence.

        RULES:
        - Always resets the cursor to 0 and stops playback
        - Empty or whitespace-only text leaves the session IDLE
        """
        self._words = tuple(segment(text))
        self._current_index = 0
        self._is_playing = False
        self._finished = False
        logger.debug("Loaded %d words", len(self._words))
        self._publish(words_changed=True)

    def toggle_play(self) -> None:
        """Flip between playing and paused. Ignored while no words are loaded."""
        if not self._words:
            return
        self._is_playing = not self._is_playing
        self._finished = False
        self._publish()

    def reset(self) -> None:
        """Stop playback and rewind to the first word."""
        self._is_playing = False
        self._current_index = 0
        self._finished = False
        self._publish()

    def set_speed(self, value: int) -> None:
        """Change the reading speed; playback and cursor are untouched.

        Raises:
            InvalidSpeedError: If value is not one of the Speed choices.
        """
        self._speed = Speed.parse(value)
        self._publish()

    def advance(self) -> None:
        """Move the cursor forward one word, finishing at the last word.

        RULES:
        - At the last index: stop playback, keep the cursor, state FINISHED
        - Repeated calls at the boundary change nothing further
        - No-op when no words are loaded
        """
        if not self._words:
            return
        if self._current_index + 1 >= len(self._words):
            if self._is_playing:
                self._finished = True
            self._is_playing = False
        else:
            self._current_index += 1
        self._publish()
