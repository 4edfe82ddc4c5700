"""
Tick scheduling abstraction.

The orchestrator never talks to a display loop directly. It asks a
scheduler to run a callback on the next refresh and may cancel that
request. ``ManualScheduler`` drives headless runs and tests; the pygame
window in ``mandalaflow.app`` advances one once per display refresh.
"""

import itertools
from typing import Callable, Protocol

TickCallback = Callable[[], None]


class Scheduler(Protocol):
    def schedule(self, callback: TickCallback) -> int:
        """Run ``callback`` on the next refresh. Returns a handle."""
        ...

    def cancel(self, handle: int) -> None:
        """Drop a pending callback. Unknown handles are ignored."""
        ...


class ManualScheduler:
    """
    Scheduler advanced explicitly by the caller.

    Each ``advance()`` is one display refresh: every callback pending at the
    start of the refresh runs once. Callbacks scheduled during a refresh
    wait for the next one.
    """

    def __init__(self):
        self._pending: dict[int, TickCallback] = {}
        self._handles = itertools.count(1)
        self.refreshes = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def schedule(self, callback: TickCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def advance(self, refreshes: int = 1) -> int:
        """
        Simulate display refreshes.

        Returns:
            Number of callbacks that ran.
        """
        ran = 0
        for _ in range(refreshes):
            due = self._pending
            self._pending = {}
            self.refreshes += 1
            for callback in due.values():
                callback()
                ran += 1
        return ran
