"""Shared fixtures: a fixed clock, an in-memory store and a small quest catalog."""
from __future__ import annotations

import os
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

# Keep test runs from writing into the project's logs/ folder
os.environ.setdefault("JOBQUEST_LOG_DIR", tempfile.mkdtemp(prefix="jobquest-logs-"))

from jobquest.models import GameState, Job  # noqa: E402
from jobquest.store import MemoryStore  # noqa: E402

NOON = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Callable clock the tests move forward by hand."""

    def __init__(self, start: datetime = NOON) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **delta) -> datetime:
        self.current = self.current + timedelta(**delta)
        return self.current


def make_job(job_id: str, title: str = "Support Engineer", **fields) -> Job:
    return Job(
        id=job_id,
        title=title,
        company=fields.pop("company", "Acme"),
        location=fields.pop("location", "Remote"),
        url=fields.pop("url", f"https://example.com/{job_id}"),
        **fields,
    )


@pytest.fixture(autouse=True)
def utc_days(monkeypatch: pytest.MonkeyPatch) -> None:
    """Calendar-day rules run in UTC so NOON-based dates are unambiguous."""
    monkeypatch.setenv("JOBQUEST_TZ", "UTC")


@pytest.fixture
def now() -> datetime:
    return NOON


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def state() -> GameState:
    return GameState()


@pytest.fixture
def catalog() -> dict[str, Job]:
    jobs = [make_job(f"job-{i}", title=f"Quest {i}") for i in range(1, 4)]
    return {j.id: j for j in jobs}


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()
