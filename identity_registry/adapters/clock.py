"""
Clock adapters - Implement the Clock protocol.

The registry never reads time itself; the substrate stamps each
mutating call with a value from one of these clocks.
"""

import threading
import time


class LogicalClock:
    """
    Counter clock: 1, 2, 3, ...

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, start: int = 1) -> None:
        self._next = start
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value


class WallClock:
    """
    Unix-seconds clock that never goes backwards.

    If the system clock steps back, the last issued value is repeated
    until wall time catches up.
    """

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            self._last = max(self._last, int(time.time()))
            return self._last


def make_clock(kind: str) -> LogicalClock | WallClock:
    """Build the clock named in settings ("logical" or "wall")."""
    if kind == "logical":
        return LogicalClock()
    if kind == "wall":
        return WallClock()
    raise ValueError(f"Unknown clock kind: {kind}")
