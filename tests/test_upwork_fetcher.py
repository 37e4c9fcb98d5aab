"""
Unit tests for fetchers/base.py and fetchers/upwork.py

Covers the rate-limited GET, error wrapping and listing extraction.
"""

from unittest.mock import MagicMock

import pytest
import requests

from errors import ExtractionAnomaly, FetchError
from fetchers.upwork import UpworkFetcher, absolute_link, job_id_from_link
from ratelimit import RequestThrottler


def card(title="React app", href="/jobs/React-app_~01abc/", skills=("React developer",)):
    anchor = f'<a href="{href}">{title}</a>' if href is not None else title
    heading = f'<h3 data-test="job-title">{anchor}</h3>' if title is not None else ""
    tags = "".join(f'<span data-test="attr-item"> {s} </span>' for s in skills)
    return f'<section class="up-card-section">{heading}<div>{tags}</div></section>'


def page(*cards):
    return "<html><body>" + "".join(cards) + "</body></html>"


@pytest.fixture
def fetcher():
    return UpworkFetcher("upwork", "https://www.upwork.com/nx/jobs/search/?q=x", RequestThrottler(0), session=MagicMock())


def test_job_id_from_link():
    assert job_id_from_link("https://www.upwork.com/jobs/Title_~01abc/") == "01abc"
    assert job_id_from_link("https://www.upwork.com/jobs/~0123?source=rss") == "0123"


def test_job_id_from_link_without_token():
    with pytest.raises(ExtractionAnomaly):
        job_id_from_link("https://www.upwork.com/jobs/no-token")


def test_absolute_link():
    assert absolute_link("/jobs/~1") == "https://www.upwork.com/jobs/~1"
    assert absolute_link("jobs/~1") == "https://www.upwork.com/jobs/~1"
    assert absolute_link("https://www.upwork.com/jobs/~1") == "https://www.upwork.com/jobs/~1"


def test_extract_fields(fetcher):
    jobs = fetcher.extract(page(card(skills=("React developer", "Node.js"))))

    assert len(jobs) == 1
    job = jobs[0]
    assert job.id == "01abc"
    assert job.title == "React app"
    assert job.link == "https://www.upwork.com/jobs/React-app_~01abc/"
    assert job.skills == ["React developer", "Node.js"]


def test_extract_is_deterministic(fetcher):
    html = page(card(href="/jobs/A_~1/"), card(href="/jobs/B_~2/"))

    first = [j.id for j in fetcher.extract(html)]
    second = [j.id for j in fetcher.extract(html)]

    assert first == second == ["1", "2"]


def test_extract_keeps_document_order(fetcher):
    html = page(card(title="C", href="/jobs/~3"), card(title="A", href="/jobs/~1"), card(title="B", href="/jobs/~2"))

    assert [j.title for j in fetcher.extract(html)] == ["C", "A", "B"]


def test_extract_skips_malformed_containers(fetcher):
    html = page(
        card(title=None),
        card(href=None),
        card(href="/jobs/no-token/"),
        card(title="Good", href="/jobs/~9"),
    )

    jobs = fetcher.extract(html)

    assert [j.id for j in jobs] == ["9"]


def test_extract_empty_page(fetcher):
    assert fetcher.extract("<html><body><p>Nothing here</p></body></html>") == []
    assert fetcher.extract("") == []


def test_fetch_returns_body_and_uses_throttler():
    session = MagicMock()
    session.get.return_value.text = "<html></html>"
    throttler = MagicMock()
    f = UpworkFetcher("upwork", "https://example.test/search", throttler, session=session, timeout=5)

    assert f.fetch() == "<html></html>"
    throttler.wait.assert_called_once()
    session.get.assert_called_once_with("https://example.test/search", timeout=5)


def test_fetch_http_error_raises_fetch_error():
    session = MagicMock()
    session.get.return_value.raise_for_status.side_effect = requests.HTTPError("403 Forbidden")
    throttler = MagicMock()
    f = UpworkFetcher("upwork", "https://example.test/search", throttler, session=session)

    with pytest.raises(FetchError) as excinfo:
        f.fetch()

    assert isinstance(excinfo.value.__cause__, requests.HTTPError)
    throttler.wait.assert_called_once()


def test_fetch_network_error_raises_fetch_error():
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("boom")
    f = UpworkFetcher("upwork", "https://example.test/search", RequestThrottler(0), session=session)

    with pytest.raises(FetchError):
        f.fetch()


def test_two_fetches_are_a_window_apart():
    now = [0.0]
    dispatched = []

    def sleep(seconds):
        now[0] += seconds

    session = MagicMock()
    session.get.side_effect = lambda *a, **kw: dispatched.append(now[0]) or MagicMock(text="")
    throttler = RequestThrottler(60, clock=lambda: now[0], sleep=sleep)
    f = UpworkFetcher("upwork", "https://example.test/search", throttler, session=session)

    f.fetch()
    f.fetch()

    assert dispatched[1] - dispatched[0] >= 60


def test_fetch_jobs(fetcher):
    fetcher.session.get.return_value.text = page(card(href="/jobs/~7"))

    jobs = fetcher.fetch_jobs()

    assert [j.id for j in jobs] == ["7"]


def test_absolute_link_protocol_relative():
    assert absolute_link("//www.upwork.com/jobs/~1") == "https://www.upwork.com/jobs/~1"


def test_extract_protocol_relative_href(fetcher):
    jobs = fetcher.extract(page(card(href="//www.upwork.com/jobs/Title_~01xyz/")))

    assert jobs[0].link == "https://www.upwork.com/jobs/Title_~01xyz/"
    assert jobs[0].id == "01xyz"
