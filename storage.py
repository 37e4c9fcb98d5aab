"""Persistence for seen job postings."""

from __future__ import annotations

import csv
import datetime as dt
import json
import logging
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional

from errors import PersistenceError
from models import JobPosting, SeenRecord

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS seen_jobs (
    job_id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    link TEXT NOT NULL,
    skills TEXT NOT NULL,
    first_seen_at TEXT NOT NULL
)
"""


def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat(timespec="seconds")


def _row_to_record(row: sqlite3.Row) -> SeenRecord:
    return SeenRecord(
        id=row["job_id"],
        title=row["title"],
        link=row["link"],
        skills=json.loads(row["skills"]),
        first_seen_at=row["first_seen_at"],
    )


class SeenJobStore:
    """Durable set of job ids that have already been reported.

    One connection is opened for the lifetime of the process and shared by
    passes, which never overlap.
    """

    def __init__(self, db_path: str, skip_errors: bool = False) -> None:
        self.db_path = db_path
        self.skip_errors = skip_errors
        self._conn: Optional[sqlite3.Connection] = None

    def open(self) -> "SeenJobStore":
        if self._conn is not None:
            return self
        try:
            if self.db_path != ":memory:" and not self.db_path.startswith("file:"):
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self.db_path, uri=self.db_path.startswith("file:"), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.execute(SCHEMA)
            conn.commit()
        except (sqlite3.Error, OSError) as exc:
            raise PersistenceError(f"Could not open seen-jobs store at {self.db_path}: {exc}") from exc
        self._conn = conn
        logger.info("Connected to seen-jobs store at %s", self.db_path)
        return self

    def close(self) -> None:
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.info("Closed seen-jobs store")

    def __enter__(self) -> "SeenJobStore":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise PersistenceError("Seen-jobs store is not open")
        return self._conn

    def get(self, job_id: str) -> Optional[SeenRecord]:
        try:
            row = self.conn.execute("SELECT * FROM seen_jobs WHERE job_id = ?", (job_id,)).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Lookup failed for job {job_id}: {exc}") from exc
        return _row_to_record(row) if row else None

    def contains(self, job_id: str) -> bool:
        try:
            row = self.conn.execute("SELECT 1 FROM seen_jobs WHERE job_id = ?", (job_id,)).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Lookup failed for job {job_id}: {exc}") from exc
        return row is not None

    def record(self, job: JobPosting) -> bool:
        """Insert ``job`` if its id is absent. Returns True when a row was written."""
        try:
            cur = self.conn.execute(
                "INSERT OR IGNORE INTO seen_jobs (job_id, title, link, skills, first_seen_at) VALUES (?, ?, ?, ?, ?)",
                (job.id, job.title, job.link, json.dumps(list(job.skills)), _now_iso()),
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Write failed for job {job.id}: {exc}") from exc
        return cur.rowcount == 1

    def reconcile(self, jobs: Iterable[JobPosting]) -> List[JobPosting]:
        """Record unseen jobs and return them, in input order.

        Jobs are handled one at a time so a duplicate within the same batch is
        stored and reported once.
        """
        new_jobs: List[JobPosting] = []
        for job in jobs:
            try:
                if self.contains(job.id):
                    continue
                self.record(job)
            except PersistenceError:
                if not self.skip_errors:
                    raise
                logger.exception("Skipping job %s after store failure", job.id)
                continue
            new_jobs.append(job)
        return new_jobs

    def count(self) -> int:
        try:
            return self.conn.execute("SELECT COUNT(*) FROM seen_jobs").fetchone()[0]
        except sqlite3.Error as exc:
            raise PersistenceError(f"Count failed: {exc}") from exc

    def all_records(self) -> List[SeenRecord]:
        try:
            rows = self.conn.execute("SELECT * FROM seen_jobs ORDER BY first_seen_at, job_id").fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Export query failed: {exc}") from exc
        return [_row_to_record(row) for row in rows]


def save_records_to_csv(records: Iterable[SeenRecord], path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    header = ["job_id", "title", "link", "skills", "first_seen_at"]

    with open(path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(header)
        for record in records:
            writer.writerow(
                [
                    record.id,
                    record.title,
                    record.link,
                    ", ".join(record.skills),
                    record.first_seen_at,
                ]
            )
