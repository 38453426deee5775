"""Trailing-edge debouncer for bursty input such as search keystrokes."""

from __future__ import annotations

import time
from typing import Any, Callable


class Debouncer:
    """Call *callback* once input has been idle for *window* seconds.

    ``trigger`` records the latest arguments and pushes the deadline out;
    ``flush`` fires the callback with those arguments once the deadline has
    passed. The owner drives ``flush`` from its own timer, so nothing here
    runs on another thread.
    """

    def __init__(
        self,
        callback: Callable[..., Any],
        window: float = 0.3,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if window < 0:
            raise ValueError("window must be >= 0")
        self._callback = callback
        self.window = window
        self._clock = clock
        self._deadline: float | None = None
        self._args: tuple[Any, ...] = ()

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def trigger(self, *args: Any) -> None:
        self._args = args
        self._deadline = self._clock() + self.window

    def flush(self, force: bool = False) -> bool:
        """Fire if the idle window elapsed (or *force*). Returns whether it fired."""
        if self._deadline is None:
            return False
        if not force and self._clock() < self._deadline:
            return False
        args = self._args
        self.cancel()
        self._callback(*args)
        return True

    def cancel(self) -> None:
        self._deadline = None
        self._args = ()
