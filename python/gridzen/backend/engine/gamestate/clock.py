"""Countdown clock for a game in progress."""

from __future__ import annotations


class SessionClock:
    """Counts whole seconds down to zero, one ``tick()`` per second.

    The clock does not read wall time; whoever owns the real timer calls
    ``tick()``.  Once it reaches zero or is stopped, further ticks do
    nothing.
    """

    def __init__(self) -> None:
        self.time_left: int = 0
        self._running: bool = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self, seconds: int) -> None:
        if seconds <= 0:
            raise ValueError("Countdown must start above zero.")
        self.time_left = seconds
        self._running = True

    def stop(self) -> None:
        self._running = False

    def tick(self) -> bool:
        """Advance one second. Returns True on the tick that hits zero."""
        if not self._running:
            return False
        self.time_left -= 1
        if self.time_left <= 0:
            self.time_left = 0
            self._running = False
            return True
        return False
