"""CLI entry for watching Upwork for new job postings."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from functools import partial
from typing import List, Optional

from config import Settings
from errors import PersistenceError
from fetchers.base import make_session
from fetchers.upwork import UpworkFetcher
from notifier import EmailNotifier
from pipeline import ExtractionHealth, run_pass
from ratelimit import RequestThrottler
from scheduler import JobWatcher
from storage import SeenJobStore, save_records_to_csv

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Email a digest of new Upwork jobs matching watched skill tags.")
    parser.add_argument("--once", action="store_true", help="Run a single pass and exit.")
    parser.add_argument("--export-csv", metavar="PATH", help="Write every seen job to a CSV file and exit.")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not settings.email_configured:
        logger.warning("YOUR_EMAIL, EMAIL_USER or EMAIL_PASS not set; notifications will fail")

    store = SeenJobStore(settings.db_path)
    try:
        store.open()
    except PersistenceError:
        logger.exception("Failed to connect to seen-jobs store")
        return 1

    with store:
        if args.export_csv:
            records = store.all_records()
            save_records_to_csv(records, args.export_csv)
            logger.info("Saved %d seen jobs to %s", len(records), args.export_csv)
            return 0

        fetcher = UpworkFetcher(
            source_name="upwork",
            url=settings.search_url,
            throttler=RequestThrottler(settings.request_interval_sec),
            session=make_session(verify=settings.verify_ssl, proxy=settings.proxy),
            timeout=settings.request_timeout,
        )
        notifier = EmailNotifier(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            username=settings.email_user,
            password=settings.email_pass,
            recipient=settings.recipient,
        )
        task = partial(
            run_pass,
            fetcher,
            store,
            notifier,
            settings.watchlist,
            ExtractionHealth(settings.zero_result_alert_threshold),
        )
        watcher = JobWatcher(task, interval_minutes=settings.check_interval_minutes)

        if args.once:
            try:
                return 0 if watcher.run_once() is not None else 1
            except KeyboardInterrupt:
                logger.info("Interrupted, shutting down")
                return 0

        def _handle_signal(signum, frame) -> None:
            logger.info("Received %s, shutting down", signal.Signals(signum).name)
            watcher.shutdown()

        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)
        watcher.start()
    return 0


if __name__ == "__main__":
    sys.exit(main())
