"""Data models for job postings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List

WatchList = FrozenSet[str]


@dataclass
class JobPosting:
    id: str
    title: str
    link: str
    skills: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SeenRecord:
    id: str
    title: str
    link: str
    skills: List[str]
    first_seen_at: str

    def to_posting(self) -> JobPosting:
        return JobPosting(id=self.id, title=self.title, link=self.link, skills=list(self.skills))
