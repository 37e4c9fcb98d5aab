"""Base classes for job fetchers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import requests

from errors import FetchError
from models import JobPosting
from ratelimit import RequestThrottler

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/123.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


def make_session(verify: bool = True, proxy: Optional[str] = None) -> requests.Session:
    sess = requests.Session()
    sess.headers.update(HEADERS)
    if proxy:
        sess.proxies.update({"http": proxy, "https": proxy})
    sess.verify = verify
    return sess


class BaseFetcher(ABC):
    def __init__(
        self,
        source_name: str,
        url: str,
        throttler: RequestThrottler,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ) -> None:
        self.source_name = source_name
        self.url = url
        self.throttler = throttler
        self.session = session or make_session()
        self.timeout = timeout

    def fetch(self, url: Optional[str] = None) -> str:
        """GET ``url`` (default: the source page) under the shared rate cap."""
        url = url or self.url
        self.throttler.wait()
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise FetchError(f"Request failed for {url}: {exc}") from exc
        return resp.text

    @abstractmethod
    def extract(self, html: str) -> List[JobPosting]:
        raise NotImplementedError

    def fetch_jobs(self) -> List[JobPosting]:
        jobs = self.extract(self.fetch())
        logger.info("%s fetched %d jobs", self.source_name, len(jobs))
        return jobs
