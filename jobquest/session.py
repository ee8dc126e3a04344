"""Per-profile command dispatcher.

A ``QuestSession`` is the explicit context for one player: which profile is
active, its game state and quest catalog, and the store they live in. Each
command runs the daily mission reset, applies one engine function, persists
both documents and only then swaps the in-memory state. A rejected command
comes back as a single warning/error event with nothing changed.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from jobquest import clock, engine
from jobquest.errors import QuestError
from jobquest.followups import due_follow_ups, next_pending
from jobquest.lifecycle import stage_of
from jobquest.log import get_logger
from jobquest.models import (
    Application,
    ApplicationStatus,
    Event,
    FollowUp,
    GameState,
    JobCatalog,
    catalog_from_dict,
    catalog_to_dict,
)
from jobquest.rules import DEFAULT_SNOOZE_DAYS, level_for
from jobquest.store import KeyValueStore, gamestate_key, jobs_key

log = get_logger(__name__)

Command = Callable[[GameState, JobCatalog, datetime], engine.CommandResult]


def load_documents(store: KeyValueStore, profile_id: str) -> tuple[GameState, JobCatalog]:
    """Read one profile's documents, substituting initial values for missing keys."""
    raw_state = store.get(gamestate_key(profile_id))
    raw_jobs = store.get(jobs_key(profile_id))
    state = GameState.from_dict(raw_state) if raw_state is not None else engine.initial_state()
    catalog = catalog_from_dict(raw_jobs)

    state.level = level_for(len(state.applications))
    missing = [
        jid for jid in list(state.applications) + state.saved_jobs if jid not in catalog
    ]
    if missing:
        log.warning("Profile %s references %d quest(s) missing from its catalog", profile_id, len(missing))
    return state, catalog


class QuestSession:
    def __init__(
        self,
        store: KeyValueStore,
        profile_id: str,
        *,
        now: Callable[[], datetime] = clock.now,
        snooze_days: int = DEFAULT_SNOOZE_DAYS,
    ) -> None:
        self.store = store
        self.snooze_days = snooze_days
        self._now = now
        self.profile_id = profile_id
        self.state, self.catalog = load_documents(store, profile_id)

    # ── Dispatch ─────────────────────────────────────────────────────────

    def _run(self, name: str, command: Command) -> list[Event]:
        now = self._now()
        state = engine.daily_mission_reset(self.state, now)
        try:
            result = command(state, self.catalog, now)
        except QuestError as exc:
            log.warning("[%s] %s rejected: %s", self.profile_id, name, exc.code)
            return [Event(kind=exc.severity, message=exc.message, data={"code": exc.code})]
        self._commit(result)
        log.info("[%s] %s → xp=%d level=%d streak=%d", self.profile_id, name,
                 result.state.xp, result.state.level, result.state.streak)
        return result.events

    def _commit(self, result: engine.CommandResult) -> None:
        self.store.put_many({
            gamestate_key(self.profile_id): result.state.to_dict(),
            jobs_key(self.profile_id): catalog_to_dict(result.catalog),
        })
        self.state, self.catalog = result.state, result.catalog

    # ── Commands ─────────────────────────────────────────────────────────

    def check_in(self) -> list[Event]:
        return self._run("check_in", engine.check_in)

    def submit(self, job_id: str) -> list[Event]:
        return self._run("submit", lambda s, c, now: engine.submit_job(s, c, job_id, now))

    def add_job(self, job_data: dict[str, Any], action: str = "save") -> list[Event]:
        return self._run("add_job", lambda s, c, now: engine.add_job(s, c, job_data, action, now))

    def complete_mission(self, mission_id: str) -> list[Event]:
        return self._run(
            "complete_mission", lambda s, c, now: engine.complete_mission(s, c, mission_id, now)
        )

    def update_application(self, job_id: str, updated: Application) -> list[Event]:
        return self._run(
            "update_application",
            lambda s, c, now: engine.update_application(s, c, job_id, updated, now),
        )

    def set_status(self, job_id: str, status: ApplicationStatus) -> list[Event]:
        return self._run("set_status", lambda s, c, now: engine.set_status(s, c, job_id, status, now))

    def complete_follow_up(self, job_id: str, follow_up_id: str) -> list[Event]:
        return self._run(
            "complete_follow_up",
            lambda s, c, now: engine.complete_follow_up(s, c, job_id, follow_up_id, now),
        )

    def snooze_follow_up(self, job_id: str, follow_up_id: str, days: int | None = None) -> list[Event]:
        span = days if days is not None else self.snooze_days
        return self._run(
            "snooze_follow_up",
            lambda s, c, now: engine.snooze_follow_up(s, c, job_id, follow_up_id, now, span),
        )

    def delete_saved_job(self, job_id: str) -> list[Event]:
        return self._run(
            "delete_saved_job", lambda s, c, now: engine.delete_saved_job(s, c, job_id, now)
        )

    def reset(self) -> list[Event]:
        result = engine.reset_profile()
        self.store.delete_many([gamestate_key(self.profile_id), jobs_key(self.profile_id)])
        self.state, self.catalog = result.state, result.catalog
        log.warning("[%s] profile data reset", self.profile_id)
        return result.events

    def switch_profile(self, profile_id: str) -> None:
        """Make another profile active. Its documents are loaded before anything is swapped."""
        state, catalog = load_documents(self.store, profile_id)
        self.profile_id, self.state, self.catalog = profile_id, state, catalog
        log.info("Switched to profile %s", profile_id)

    # ── Reads ────────────────────────────────────────────────────────────

    def now(self) -> datetime:
        return self._now()

    def next_follow_up(self, job_id: str) -> FollowUp | None:
        app = self.state.applications.get(job_id)
        return next_pending(app, self._now()) if app else None

    def due_follow_ups(self) -> list[tuple[FollowUp, Application]]:
        return due_follow_ups(self.state, self._now())

    def stage(self, job_id: str) -> str | None:
        return stage_of(self.state, job_id)
