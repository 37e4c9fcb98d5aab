"""Fetcher for the Upwork job search page."""

from __future__ import annotations

import logging
import re
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from errors import ExtractionAnomaly
from fetchers.base import BaseFetcher
from models import JobPosting

logger = logging.getLogger(__name__)

UPWORK_ORIGIN = "https://www.upwork.com"

CARD_SELECTOR = ".up-card-section"
TITLE_SELECTOR = 'h3[data-test="job-title"]'
SKILL_SELECTOR = 'span[data-test="attr-item"]'

_JOB_TOKEN = re.compile(r"~([^/?#]+)")


def job_id_from_link(link: str) -> str:
    """Return the job token that follows ``~`` in a posting link."""
    match = _JOB_TOKEN.search(link or "")
    if not match:
        raise ExtractionAnomaly(f"No job token in link {link!r}")
    return match.group(1)


def absolute_link(href: str) -> str:
    return urljoin(UPWORK_ORIGIN + "/", href)


def parse_card(card: Tag) -> Optional[JobPosting]:
    """Build a posting from one listing container, or None if it is not a job."""
    title_tag = card.select_one(TITLE_SELECTOR)
    anchor = title_tag.select_one("a") if title_tag else None
    title = title_tag.get_text(strip=True) if title_tag else ""
    href = (anchor.get("href") or "").strip() if anchor else ""
    if not title or not href:
        return None

    link = absolute_link(href)
    try:
        job_id = job_id_from_link(link)
    except ExtractionAnomaly as exc:
        logger.debug("Skipping container: %s", exc)
        return None

    skills = [s.get_text(strip=True) for s in card.select(SKILL_SELECTOR)]
    return JobPosting(id=job_id, title=title, link=link, skills=[s for s in skills if s])


class UpworkFetcher(BaseFetcher):
    def extract(self, html: str) -> List[JobPosting]:
        soup = BeautifulSoup(html or "", "html.parser")
        jobs: List[JobPosting] = []
        cards = soup.select(CARD_SELECTOR)
        for card in cards:
            job = parse_card(card)
            if job is None:
                continue
            jobs.append(job)
        if len(jobs) < len(cards):
            logger.debug("Skipped %d non-job containers", len(cards) - len(jobs))
        return jobs
