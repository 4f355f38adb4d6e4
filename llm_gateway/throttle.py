"""Fixed-interval throttle shared by outbound LLM calls."""
from __future__ import annotations

import threading
import time
from typing import Callable, Optional


class FixedIntervalThrottle:
    """Enforce a minimum spacing between consecutive calls.

    One instance is shared by every caller that should be spaced together, so
    concurrent requests queue behind the lock and leave at most one call per
    ``interval_s``. ``clock`` and ``sleep`` are injectable for tests.
    """

    def __init__(
        self,
        interval_s: float = 1.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.interval_s = interval_s
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last: Optional[float] = None

    def wait(self) -> float:
        """Block until the next call is allowed and return the time slept."""

        with self._lock:
            delay = 0.0
            if self._last is not None:
                delay = self.interval_s - (self._clock() - self._last)
                if delay > 0:
                    self._sleep(delay)
                else:
                    delay = 0.0
            self._last = self._clock()
            return delay


__all__ = ["FixedIntervalThrottle"]
