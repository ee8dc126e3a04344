"""Tests for document (de)serialization and date helpers."""
from __future__ import annotations

import time
from datetime import date, datetime, timedelta, timezone

import pytest

from jobquest import clock, engine
from jobquest.models import (
    Application,
    ApplicationStatus,
    GameState,
    Job,
    Profile,
    catalog_from_dict,
    catalog_to_dict,
)

BROWSER_EXPORT = {
    "xp": 23,
    "level": 1,
    "streak": 2,
    "bestStreak": 4,
    "lastCheckIn": "2025-03-09T08:15:00.000Z",
    "dailyMissions": {"check_linkedin": True},
    "lastMissionReset": "2025-03-09",
    "unlockedBadges": ["unbroken", "unbroken"],
    "applications": {
        "job-1": {
            "jobId": "job-1",
            "jobTitle": "Localization PM",
            "company": "Kitsune",
            "status": "In Review",
            "submittedAt": "2025-03-01T10:00:00.000Z",
            "followUps": [
                {"id": "job-1-fu1", "dueDate": "2025-03-04T10:00:00.000Z", "completed": True},
                {"id": "job-1-fu2", "dueDate": "2025-03-11T10:00:00.000Z", "completed": False,
                 "snoozedUntil": "2025-03-12T10:00:00.000Z"},
            ],
        }
    },
    "savedJobs": ["job-2", "job-2", "job-3"],
}


class TestGameStateDocuments:
    def test_loads_browser_export(self) -> None:
        state = GameState.from_dict(BROWSER_EXPORT)
        app = state.applications["job-1"]
        assert state.best_streak == 4
        assert app.status == ApplicationStatus.IN_REVIEW
        assert app.follow_ups[0].completed is True
        assert app.follow_ups[1].snoozed_until == "2025-03-12T10:00:00.000Z"

    def test_duplicate_ids_are_collapsed(self) -> None:
        state = GameState.from_dict(BROWSER_EXPORT)
        assert state.unlocked_badges == ["unbroken"]
        assert state.saved_jobs == ["job-2", "job-3"]

    def test_written_keys_are_camel_case(self) -> None:
        doc = GameState.from_dict(BROWSER_EXPORT).to_dict()
        assert set(doc) == {
            "xp", "level", "streak", "bestStreak", "lastCheckIn", "dailyMissions",
            "lastMissionReset", "unlockedBadges", "applications", "savedJobs",
        }
        assert doc["applications"]["job-1"]["followUps"][1]["snoozedUntil"].startswith("2025-03-12")
        assert "snoozedUntil" not in doc["applications"]["job-1"]["followUps"][0]

    def test_empty_document_is_initial_state(self) -> None:
        assert GameState.from_dict({}) == GameState()


class TestCatalog:
    def test_optional_fields_only_written_when_set(self) -> None:
        catalog = {
            "a": Job(id="a", title="T", company="C", location="L", url="#"),
            "b": Job(id="b", title="T", company="C", location="L", url="#", source="CSV Import"),
        }
        doc = catalog_to_dict(catalog)
        assert "source" not in doc["a"]
        assert doc["b"]["source"] == "CSV Import"
        assert catalog_from_dict(doc) == catalog

    def test_missing_catalog_is_empty(self) -> None:
        assert catalog_from_dict(None) == {}


class TestProfile:
    def test_accepts_camel_case_preferences(self) -> None:
        profile = Profile.from_dict({
            "id": "erik",
            "name": "Erik",
            "preferences": {"remoteOnly": True, "keywords": ["ai", "ai"], "preferredRoles": ["Localization"]},
        })
        assert profile.preferences.remote_only is True
        assert profile.preferences.keywords == ("ai",)
        assert profile.to_dict()["preferences"]["preferred_roles"] == ["Localization"]


class TestClock:
    def test_parses_trailing_z(self) -> None:
        moment = clock.parse_iso("2025-03-09T08:15:00.000Z")
        assert moment == datetime(2025, 3, 9, 8, 15, tzinfo=timezone.utc)

    def test_naive_values_get_the_local_zone(self) -> None:
        assert clock.parse_iso("2025-03-09T08:15:00").tzinfo is not None

    def test_day_rules_follow_configured_zone(self, monkeypatch) -> None:
        late_utc = datetime(2025, 3, 9, 23, 30, tzinfo=timezone.utc)
        monkeypatch.setenv("JOBQUEST_TZ", "Asia/Tokyo")
        assert clock.day_key(late_utc) == "2025-03-10"
        monkeypatch.setenv("JOBQUEST_TZ", "UTC")
        assert clock.day_key(late_utc) == "2025-03-09"

    def test_previous_day(self) -> None:
        a = datetime(2025, 3, 9, 23, 0, tzinfo=timezone.utc)
        b = datetime(2025, 3, 10, 1, 0, tzinfo=timezone.utc)
        assert clock.is_previous_day(a, b)
        assert not clock.is_previous_day(a, a)
        assert clock.same_day(b, b.replace(hour=22))


@pytest.fixture
def system_eastern_zone(monkeypatch):
    """System zone with US daylight saving rules and no JOBQUEST_TZ set."""
    monkeypatch.delenv("JOBQUEST_TZ", raising=False)
    monkeypatch.setenv("TZ", "EST5EDT,M3.2.0,M11.1.0")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


class TestSystemZoneDays:
    """Without JOBQUEST_TZ each instant uses the system offset in force at that instant."""

    EST = timezone(timedelta(hours=-5))
    EDT = timezone(timedelta(hours=-4))

    @pytest.mark.parametrize("late, expected", [
        (datetime(2026, 1, 10, 23, 30, tzinfo=EST), date(2026, 1, 10)),
        (datetime(2026, 7, 10, 23, 30, tzinfo=EDT), date(2026, 7, 10)),
    ])
    def test_late_evening_stays_on_its_day(self, system_eastern_zone, late, expected) -> None:
        assert clock.local_date(late) == expected
        assert clock.day_key(late) == expected.isoformat()

    @pytest.mark.parametrize("last, moment", [
        ("2026-01-10T23:30:00-05:00", datetime(2026, 1, 11, 9, 0, tzinfo=EST)),
        ("2026-07-10T23:30:00-04:00", datetime(2026, 7, 11, 9, 0, tzinfo=EDT)),
        ("2026-03-07T23:30:00-05:00", datetime(2026, 3, 8, 9, 0, tzinfo=EDT)),
    ])
    def test_next_day_check_in_extends_streak(self, system_eastern_zone, last, moment) -> None:
        state = GameState(streak=3, best_streak=3, last_check_in=last)
        assert engine.check_in(state, {}, moment).state.streak == 4

    def test_now_is_aware(self, system_eastern_zone) -> None:
        assert clock.now().tzinfo is not None


class TestApplicationDocuments:
    def test_null_status_loads_as_submitted(self) -> None:
        doc = {"jobId": "job-1", "status": None, "submittedAt": "2025-03-01T10:00:00.000Z"}
        assert Application.from_dict(doc).status == ApplicationStatus.SUBMITTED
