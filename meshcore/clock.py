"""Strictly increasing 32-bit UNIX timestamps."""

from __future__ import annotations

import threading
import time
from typing import Callable

_U32 = 0xFFFFFFFF


def _system_now() -> int:
    return int(time.time()) & _U32


class Clock:
    """Timestamp source whose unique values never repeat, even within one second."""

    def __init__(self, now_fn: Callable[[], int] | None = None) -> None:
        self._lock = threading.Lock()
        self._last_unique = 0
        self._now_fn = now_fn or _system_now

    def get_current_time(self) -> int:
        """Current UNIX time as a 32-bit value."""
        with self._lock:
            return self._now_fn()

    def set_current_time(self, t: int) -> None:
        """Use ``t`` as the current time, advancing with real elapsed time from now on."""
        offset = t & _U32
        base = time.monotonic()

        def now() -> int:
            return (offset + int(time.monotonic() - base)) & _U32

        with self._lock:
            self._now_fn = now

    def get_current_time_unique(self) -> int:
        """A timestamp strictly greater than any previously returned by this method."""
        with self._lock:
            t = self._now_fn()
            if t <= self._last_unique:
                self._last_unique = (self._last_unique + 1) & _U32
                return self._last_unique
            self._last_unique = t
            return t