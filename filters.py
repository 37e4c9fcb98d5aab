"""Skill-tag filters for job relevance."""

from __future__ import annotations

from typing import AbstractSet, List, Sequence

from models import JobPosting


def job_matches_watchlist(job: JobPosting, watchlist: AbstractSet[str]) -> bool:
    """
    Returns True if at least one of the job's skill tags is on the watch-list.
    Matching is exact and case-sensitive; an empty watch-list matches nothing.
    """
    return any(skill in watchlist for skill in job.skills)


def filter_jobs(jobs: Sequence[JobPosting], watchlist: AbstractSet[str]) -> List[JobPosting]:
    return [job for job in jobs if job_matches_watchlist(job, watchlist)]
