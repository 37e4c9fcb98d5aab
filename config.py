"""Environment-based settings for upwork_job_watcher."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List

from dotenv import load_dotenv

from models import WatchList

load_dotenv()

DEFAULT_SEARCH_URL = "https://www.upwork.com/nx/jobs/search/?q=web%20developer"
DEFAULT_TAGS = ["Fullstack developer", "Nextjs developer", "React developer", "MERN developer"]


def _parse_list(env_name: str) -> List[str]:
    raw = os.getenv(env_name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_bool(env_name: str, default: bool) -> bool:
    raw = os.getenv(env_name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in {"0", "false", "no"}


@dataclass
class Settings:
    recipient: str
    email_user: str
    email_pass: str
    smtp_host: str
    smtp_port: int
    db_path: str
    search_url: str
    watchlist: WatchList
    check_interval_minutes: int
    request_interval_sec: float
    request_timeout: float
    proxy: str | None
    verify_ssl: bool
    zero_result_alert_threshold: int
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            recipient=os.getenv("YOUR_EMAIL", ""),
            email_user=os.getenv("EMAIL_USER", ""),
            email_pass=os.getenv("EMAIL_PASS", ""),
            smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
            smtp_port=int(os.getenv("SMTP_PORT", "587")),
            db_path=os.getenv("SEEN_DB_PATH", "seen_jobs.db"),
            search_url=os.getenv("SEARCH_URL", DEFAULT_SEARCH_URL),
            watchlist=frozenset(_parse_list("TAGS_TO_WATCH") or DEFAULT_TAGS),
            check_interval_minutes=int(os.getenv("CHECK_INTERVAL_MINUTES", "30")),
            request_interval_sec=float(os.getenv("REQUEST_INTERVAL_SECONDS", "60")),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
            proxy=os.getenv("HTTP_PROXY") or os.getenv("HTTPS_PROXY") or None,
            verify_ssl=_parse_bool("VERIFY_SSL", True),
            zero_result_alert_threshold=int(os.getenv("ZERO_RESULT_ALERT_THRESHOLD", "3")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def email_configured(self) -> bool:
        return bool(self.recipient and self.email_user and self.email_pass)
