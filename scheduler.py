"""Single-flight scheduling of watcher passes."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from apscheduler.schedulers.blocking import BlockingScheduler

logger = logging.getLogger(__name__)


class JobWatcher:
    """Runs ``task`` once at start and then every ``interval_minutes``.

    Both triggers go through :meth:`run_once`, which never lets two passes
    overlap: a tick that arrives while a pass is running is dropped.
    """

    def __init__(
        self,
        task: Callable[[], object],
        interval_minutes: int = 30,
        scheduler: Optional[BlockingScheduler] = None,
    ) -> None:
        self.task = task
        self.interval_minutes = interval_minutes
        self.scheduler = scheduler or BlockingScheduler()
        self.in_flight = 0
        self.max_in_flight = 0
        self._running = threading.Lock()
        self._stopped = threading.Event()
        self._counter_lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._running.locked()

    def run_once(self) -> Optional[object]:
        if not self._running.acquire(blocking=False):
            logger.warning("Previous pass still running; skipping this tick")
            return None
        with self._counter_lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        logger.info("Checking for new jobs...")
        try:
            return self.task()
        except Exception:
            logger.exception("Error checking for new jobs")
            return None
        finally:
            with self._counter_lock:
                self.in_flight -= 1
            self._running.release()

    def start(self) -> None:
        """Run the first pass now, then block running the interval schedule."""
        self.run_once()
        if self._stopped.is_set():
            return
        self.scheduler.add_job(
            self.run_once,
            "interval",
            minutes=self.interval_minutes,
            id="job-watcher",
            max_instances=1,
            coalesce=True,
        )
        # a stop request that lands before the scheduler is running is applied once it starts
        self.scheduler.add_job(self._stop_if_requested, id="job-watcher-stop-check")
        logger.info("Job watcher is running. Checking for new jobs every %d minutes.", self.interval_minutes)
        self.scheduler.start()

    def _stop_if_requested(self) -> None:
        if self._stopped.is_set() and self.scheduler.running:
            self.scheduler.shutdown(wait=False)

    def shutdown(self) -> None:
        self._stopped.set()
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
