"""Single-shot timer scheduling behind a small, swappable interface.

WHY: The playback clock needs "call this once after N milliseconds, unless
I cancel it first". The terminal player runs on asyncio, the desktop GUI
on the Tk event loop, and tests on a virtual clock. Hiding the mechanism
behind one interface keeps the clock identical across all three.

HOW: Scheduler.schedule_once() returns a ScheduledCall handle whose
cancel() guarantees the callback will not run. AsyncioScheduler wraps
loop.call_later(); TkScheduler wraps widget.after() / after_cancel().

RULES:
- Delays are float milliseconds; negative delays are treated as 0
- cancel() is idempotent and safe after the call has fired
- A cancelled call never invokes its callback
- Callbacks run on the scheduler's own loop thread only
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any


class ScheduledCall(ABC):
    """Handle for one pending single-shot callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. No-op if already fired or cancelled."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        """True once cancel() has been called."""


class Scheduler(ABC):
    """Schedules single-shot callbacks after a delay in milliseconds.

    To add a new event loop integration:
    1. Subclass Scheduler and ScheduledCall
    2. Implement schedule_once() so cancel() fully suppresses the callback
    """

    @abstractmethod
    def schedule_once(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledCall:
        """Run ``callback`` once, ``delay_ms`` milliseconds from now."""


# ---------------------------------------------------------------------------
# asyncio
# ---------------------------------------------------------------------------


class _AsyncioCall(ScheduledCall):
    def __init__(self, handle: asyncio.TimerHandle) -> None:
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """Scheduler backed by an asyncio event loop's call_later().

    RULES:
    - loop defaults to the running loop at construction time
    - Must be constructed and used from the loop's thread
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def schedule_once(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledCall:
        handle = self._loop.call_later(max(delay_ms, 0.0) / 1000.0, callback)
        return _AsyncioCall(handle)


# ---------------------------------------------------------------------------
# tkinter
# ---------------------------------------------------------------------------


class _TkCall(ScheduledCall):
    def __init__(self, widget: Any, callback: Callable[[], None], delay_ms: int) -> None:
        self._widget = widget
        self._callback = callback
        self._cancelled = False
        self._fired = False
        self._after_id = widget.after(delay_ms, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._fired = True
        self._callback()

    def cancel(self) -> None:
        if self._cancelled or self._fired:
            self._cancelled = True
            return
        self._cancelled = True
        self._widget.after_cancel(self._after_id)

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class TkScheduler(Scheduler):
    """Scheduler backed by a Tk widget's after() timer.

    WHY: Tk timers run on the main loop thread, so the clock can touch
    widgets directly from its callbacks.

    RULES:
    - Tk only accepts whole milliseconds; delays are rounded
    - widget is any object with after() / after_cancel() (usually the root)
    """

    def __init__(self, widget: Any) -> None:
        self._widget = widget

    def schedule_once(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledCall:
        return _TkCall(self._widget, callback, int(round(max(delay_ms, 0.0))))
