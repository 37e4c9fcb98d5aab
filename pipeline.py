"""One fetch -> extract -> filter -> dedup -> notify pass."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AbstractSet, Optional

from errors import NotificationError
from fetchers.base import BaseFetcher
from filters import filter_jobs
from notifier import EmailNotifier
from storage import SeenJobStore

logger = logging.getLogger(__name__)


@dataclass
class PassResult:
    scraped: int = 0
    matched: int = 0
    new: int = 0
    notified: bool = False


class ExtractionHealth:
    """Tracks consecutive passes that found no postings at all.

    A run of empty pages usually means the page layout changed and the
    selectors no longer match.
    """

    def __init__(self, alert_threshold: int = 3) -> None:
        self.alert_threshold = alert_threshold
        self.consecutive_empty = 0

    def observe(self, scraped: int) -> bool:
        """Record one pass. Returns True when a warning was logged."""
        if scraped > 0:
            self.consecutive_empty = 0
            return False
        self.consecutive_empty += 1
        if self.alert_threshold > 0 and self.consecutive_empty % self.alert_threshold == 0:
            logger.warning(
                "No postings extracted for %d consecutive passes; the page layout may have changed",
                self.consecutive_empty,
            )
            return True
        return False


def run_pass(
    fetcher: BaseFetcher,
    store: SeenJobStore,
    notifier: EmailNotifier,
    watchlist: AbstractSet[str],
    health: Optional[ExtractionHealth] = None,
) -> PassResult:
    """Run one pass. FetchError and PersistenceError propagate to the caller."""
    result = PassResult()

    jobs = fetcher.fetch_jobs()
    result.scraped = len(jobs)
    if health is not None:
        health.observe(result.scraped)

    matched = filter_jobs(jobs, watchlist)
    result.matched = len(matched)
    logger.info("%d of %d jobs match the watch-list", result.matched, result.scraped)

    # store writes happen before the email goes out
    new_jobs = store.reconcile(matched)
    result.new = len(new_jobs)
    if not new_jobs:
        logger.info("No new jobs found")
        return result

    logger.info("Found %d new job(s)", result.new)
    try:
        notifier.notify(new_jobs)
        result.notified = True
    except NotificationError:
        logger.exception("Error sending email notification for %d job(s)", result.new)
    return result
