"""Process-wide request throttling."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class RequestThrottler:
    """Allow at most one request per ``min_interval_sec`` across all callers.

    Callers that arrive early block until their slot opens; they never fail.
    """

    def __init__(
        self,
        min_interval_sec: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.min_interval_sec = max(0.0, float(min_interval_sec))
        self._clock = clock
        self._sleep = sleep
        self._next_allowed: float | None = None
        self._lock = threading.Lock()

    def wait(self) -> float:
        """Take the next slot, sleeping if needed. Returns the seconds waited."""
        waited = 0.0
        while True:
            with self._lock:
                now = self._clock()
                if self._next_allowed is None or now >= self._next_allowed:
                    self._next_allowed = now + self.min_interval_sec
                    if waited:
                        logger.debug("Throttled request for %.1fs", waited)
                    return waited
                sleep_for = self._next_allowed - now
            # wake at least once a second
            step = min(sleep_for, 1.0)
            self._sleep(step)
            waited += step
