import pytest

from models import JobPosting


def make_job(job_id: str, skills=None, title: str | None = None) -> JobPosting:
    return JobPosting(
        id=job_id,
        title=title or f"Job {job_id}",
        link=f"https://www.upwork.com/jobs/~{job_id}",
        skills=list(skills or ["React developer"]),
    )


@pytest.fixture
def job_factory():
    return make_job
