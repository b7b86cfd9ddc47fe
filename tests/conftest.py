"""Shared test fixtures for the focusread test suite.

WHY: Playback is timer-driven. Tests must control time exactly, count
how many timers are outstanding, and prove that cancelled timers never
fire — none of which a real event loop allows deterministically.

HOW: FakeScheduler implements the Scheduler interface on a virtual clock.
advance(ms) moves time forward and fires due callbacks in due order
(including callbacks scheduled while advancing). run_next() jumps
straight to the earliest pending call.

RULES:
- Time starts at 0.0 ms and only moves via advance() / run_next()
- Calls due at the same instant fire in scheduling order
- Cancelled calls are kept in history but never fire
"""

from __future__ import annotations

from typing import Callable, List, Optional

import pytest

from focusread.core.scheduler import ScheduledCall, Scheduler
from focusread.core.session import ReadingSession


class FakeCall(ScheduledCall):
    """A scheduled call on the virtual clock."""

    def __init__(self, due_ms: float, seq: int, delay_ms: float, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self.seq = seq
        self.delay_ms = delay_ms
        self.callback = callback
        self.fired = False
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not self._cancelled and not self.fired


class FakeScheduler(Scheduler):
    """Deterministic Scheduler with a virtual millisecond clock."""

    def __init__(self) -> None:
        self.now_ms = 0.0
        self.history: List[FakeCall] = []
        self._seq = 0

    def schedule_once(self, delay_ms: float, callback: Callable[[], None]) -> FakeCall:
        self._seq += 1
        call = FakeCall(self.now_ms + max(delay_ms, 0.0), self._seq, delay_ms, callback)
        self.history.append(call)
        return call

    def pending(self) -> List[FakeCall]:
        return sorted(
            (c for c in self.history if c.active),
            key=lambda c: (c.due_ms, c.seq),
        )

    def _fire(self, call: FakeCall) -> None:
        self.now_ms = max(self.now_ms, call.due_ms)
        call.fired = True
        call.callback()

    def run_next(self) -> Optional[FakeCall]:
        """Fire the earliest pending call and return it (None if idle)."""
        calls = self.pending()
        if not calls:
            return None
        self._fire(calls[0])
        return calls[0]

    def advance(self, ms: float) -> None:
        """Move the clock forward ``ms`` milliseconds, firing due calls."""
        target = self.now_ms + ms
        while True:
            due = [c for c in self.pending() if c.due_ms <= target + 1e-9]
            if not due:
                break
            self._fire(due[0])
        self.now_ms = target

    def run_all(self, limit: int = 10_000) -> int:
        """Fire calls until none are pending; return how many fired."""
        count = 0
        while self.run_next() is not None:
            count += 1
            if count >= limit:
                raise RuntimeError("Scheduler did not go idle")
        return count


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def sample_text() -> str:
    return "Hi. There, world"


@pytest.fixture
def sample_session(sample_text) -> ReadingSession:
    """Session loaded with three words at 900 WPM."""
    return ReadingSession(sample_text, speed=900)


class RecordingListener:
    """Collects every snapshot a session publishes."""

    def __init__(self) -> None:
        self.snapshots = []

    def __call__(self, snapshot) -> None:
        self.snapshots.append(snapshot)

    @property
    def last(self):
        return self.snapshots[-1]


@pytest.fixture
def recorder() -> RecordingListener:
    return RecordingListener()
