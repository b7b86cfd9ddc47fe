"""Core reading engine: segmenter, session state machine, playback clock.

WHY: The core is the only part of the reader with real logic. It must be
testable without a display, a network, or a real timer.

HOW: words.py splits text into pivot-aligned WordRecords, session.py
holds the cursor/play/speed state machine, clock.py turns the session's
current word into a delay and advances it, scheduler.py abstracts the
event loop's single-shot timers.

RULES:
- No I/O anywhere in this package
- The clock talks to the session only through its public transitions
"""

from focusread.core.clock import PlaybackClock, compute_delay_ms
from focusread.core.scheduler import AsyncioScheduler, ScheduledCall, Scheduler, TkScheduler
from focusread.core.session import (
    InvalidSpeedError,
    ReadingSession,
    SessionSnapshot,
    SessionState,
    Speed,
    compute_progress,
)
from focusread.core.words import EMPTY_WORD, WordRecord, pivot_index, segment

__all__ = [
    "AsyncioScheduler",
    "EMPTY_WORD",
    "InvalidSpeedError",
    "PlaybackClock",
    "ReadingSession",
    "ScheduledCall",
    "Scheduler",
    "SessionSnapshot",
    "SessionState",
    "Speed",
    "TkScheduler",
    "WordRecord",
    "compute_delay_ms",
    "compute_progress",
    "pivot_index",
    "segment",
]
