"""Tests for the per-profile session: persistence, rejection and profile switching."""
from __future__ import annotations

from datetime import timedelta

import pytest

from jobquest.clock import parse_iso
from jobquest.errors import StoreError
from jobquest.models import ApplicationStatus, GameState
from jobquest.session import QuestSession, load_documents
from jobquest.store import MemoryStore, gamestate_key, jobs_key


class FailingStore(MemoryStore):
    def put_many(self, docs) -> None:
        raise StoreError("disk full")


class RecordingStore(MemoryStore):
    def __init__(self) -> None:
        super().__init__()
        self.deletes: list[list[str]] = []

    def delete_many(self, keys) -> None:
        self.deletes.append(list(keys))
        super().delete_many(keys)


@pytest.fixture
def session(store, clock) -> QuestSession:
    return QuestSession(store, "erik", now=clock)


def _added_id(events) -> str:
    return next(e.data["job_id"] for e in events if "job_id" in e.data)


# =============================================================================
# Loading
# =============================================================================


class TestLoading:
    def test_missing_keys_fall_back_to_initial_values(self, store) -> None:
        state, catalog = load_documents(store, "erik")
        assert state == GameState()
        assert catalog == {}

    def test_stale_level_is_recomputed(self, store) -> None:
        store.put(gamestate_key("erik"), {"xp": 40, "level": 7})
        state, _ = load_documents(store, "erik")
        assert state.level == 1
        assert state.xp == 40


# =============================================================================
# Commands
# =============================================================================


class TestCommands:
    def test_each_command_is_persisted(self, session, store) -> None:
        session.check_in()
        assert store.get(gamestate_key("erik"))["xp"] == 5

        events = session.add_job({"title": "Localization PM", "company": "Kitsune"})
        job_id = _added_id(events)
        assert store.get(jobs_key("erik"))[job_id]["title"] == "Localization PM"
        assert store.get(gamestate_key("erik"))["savedJobs"] == [job_id]

        session.submit(job_id)
        doc = store.get(gamestate_key("erik"))
        assert doc["savedJobs"] == []
        assert doc["applications"][job_id]["status"] == "Submitted"
        assert doc["xp"] == 8

    def test_rejected_command_changes_nothing(self, session, store, clock) -> None:
        session.check_in()
        before = store.get(gamestate_key("erik"))
        clock.advance(hours=1)

        events = session.check_in()
        assert len(events) == 1
        assert events[0].kind == "warning"
        assert events[0].data == {"code": "ALREADY_CHECKED_IN"}
        assert store.get(gamestate_key("erik")) == before
        assert session.state.xp == 5

    def test_unknown_quest_is_an_error_event(self, session) -> None:
        events = session.submit("job-nope")
        assert [e.kind for e in events] == ["error"]
        assert events[0].data["code"] == "UNKNOWN_JOB"

    def test_store_failure_keeps_memory_state(self, clock) -> None:
        session = QuestSession(FailingStore(), "erik", now=clock)
        with pytest.raises(StoreError):
            session.check_in()
        assert session.state == GameState()

    def test_missions_reset_on_a_new_day(self, session, store, clock) -> None:
        session.complete_mission("check_indeed")
        assert session.state.daily_missions == {"check_indeed": True}

        clock.advance(days=1)
        session.check_in()
        assert session.state.daily_missions == {}
        assert store.get(gamestate_key("erik"))["lastMissionReset"] == "2025-03-11"

    def test_submit_action_adds_and_applies(self, session) -> None:
        events = session.add_job({"title": "QA"}, action="submit")
        job_id = _added_id(events)
        assert session.stage(job_id) == "Submitted"
        assert [e.kind for e in events][:2] == ["info", "first_quest_today"]

    def test_status_update_and_stage(self, session) -> None:
        job_id = _added_id(session.add_job({"title": "QA"}, action="submit"))
        events = session.set_status(job_id, ApplicationStatus.REJECTED)
        assert events[0].message == "Quest log updated. +1 XP for persistence!"
        assert session.stage(job_id) == "Rejected"

    def test_snooze_uses_configured_span(self, store, clock) -> None:
        session = QuestSession(store, "erik", now=clock, snooze_days=5)
        job_id = _added_id(session.add_job({"title": "QA"}, action="submit"))
        session.snooze_follow_up(job_id, f"{job_id}-fu1")
        fu = session.state.applications[job_id].follow_ups[0]
        assert parse_iso(fu.snoozed_until) == clock() + timedelta(days=5)

    @pytest.mark.parametrize("days", [0, -5])
    def test_snooze_span_below_one_day_is_rejected(self, session, days) -> None:
        job_id = _added_id(session.add_job({"title": "QA"}, action="submit"))
        before = session.state.to_dict()
        events = session.snooze_follow_up(job_id, f"{job_id}-fu1", days)
        assert [e.kind for e in events] == ["error"]
        assert events[0].data == {"code": "INVALID_SNOOZE_SPAN"}
        assert session.state.to_dict() == before

    def test_follow_up_reads(self, session, clock) -> None:
        job_id = _added_id(session.add_job({"title": "QA"}, action="submit"))
        assert session.next_follow_up(job_id).id == f"{job_id}-fu1"
        assert session.due_follow_ups() == []

        clock.advance(days=4)
        due = session.due_follow_ups()
        assert [(fu.id, app.job_id) for fu, app in due] == [(f"{job_id}-fu1", job_id)]

        session.complete_follow_up(job_id, f"{job_id}-fu1")
        assert session.due_follow_ups() == []
        assert session.next_follow_up(job_id).id == f"{job_id}-fu2"
        assert session.next_follow_up("job-nope") is None

    def test_delete_saved_job(self, session, store) -> None:
        job_id = _added_id(session.add_job({"title": "QA"}))
        session.delete_saved_job(job_id)
        assert session.stage(job_id) is None
        assert store.get(jobs_key("erik")) == {}

    def test_reset_erases_stored_documents(self, session, store) -> None:
        session.check_in()
        events = session.reset()
        assert events[0].kind == "warning"
        assert store.get(gamestate_key("erik")) is None
        assert store.get(jobs_key("erik")) is None
        assert session.state == GameState()

    def test_reset_deletes_both_documents_together(self, clock) -> None:
        store = RecordingStore()
        session = QuestSession(store, "erik", now=clock)
        session.check_in()
        session.reset()
        assert store.deletes == [[gamestate_key("erik"), jobs_key("erik")]]
        assert store.keys() == []


# =============================================================================
# Profiles
# =============================================================================


class TestProfileSwitching:
    def test_profiles_are_isolated(self, session, store) -> None:
        session.check_in()
        session.add_job({"title": "Localization PM"})

        session.switch_profile("zack")
        assert session.profile_id == "zack"
        assert session.state == GameState()
        assert session.catalog == {}
        session.complete_mission("update_resume")

        session.switch_profile("erik")
        assert session.state.xp == 5
        assert len(session.catalog) == 1
        assert store.get(gamestate_key("zack"))["xp"] == 2
