"""
Progression engine.

Turns player commands into new game states:
check in → submit / add quests → missions → application updates → follow-ups.

Every command takes the current ``GameState`` and ``JobCatalog`` and returns a
``CommandResult`` holding fresh copies plus the events to show. Inputs are
never mutated. A rejected command raises a ``QuestError`` before anything is
built, so there is no partial state to undo.
"""
from __future__ import annotations

import copy
import random
import string
import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Callable

from jobquest import followups
from jobquest.badges import evaluate_badges
from jobquest.clock import day_key, is_previous_day, parse_iso, same_day, to_iso
from jobquest.errors import (
    AlreadyCheckedIn,
    AlreadySubmitted,
    InvalidMissionId,
    UnknownJob,
)
from jobquest.lifecycle import validate_transition
from jobquest.log import get_logger
from jobquest.models import (
    Application,
    ApplicationStatus,
    Event,
    FollowUp,
    GameState,
    Job,
    JobCatalog,
)
from jobquest.rules import (
    DAILY_CHECKIN_XP,
    DEFAULT_SNOOZE_DAYS,
    MAX_RARITY,
    MIN_RARITY,
    MISSIONS_BY_ID,
    REJECTED_XP,
    SUBMISSIONS_PER_LEVEL,
    SUBMIT_XP,
    level_for,
)

log = get_logger(__name__)

JOB_DEFAULTS: dict[str, Any] = {
    "title": "Untitled Quest",
    "company": "Unknown Company",
    "location": "Unknown Location",
    "url": "#",
    "description": "No description provided.",
}

ADD_ACTIONS = ("save", "submit")


@dataclass
class CommandResult:
    state: GameState
    catalog: JobCatalog
    events: list[Event] = field(default_factory=list)


def initial_state() -> GameState:
    return GameState()


def _copy(state: GameState) -> GameState:
    return copy.deepcopy(state)


def _with_level(state: GameState) -> GameState:
    state.level = level_for(len(state.applications))
    return state


def _finish(
    state: GameState, catalog: JobCatalog, events: list[Event], now: datetime
) -> CommandResult:
    events.extend(evaluate_badges(state, catalog, now))
    return CommandResult(state=state, catalog=catalog, events=events)


def level_progress(state: GameState) -> tuple[int, int]:
    """Quests done toward the next level, and quests needed per level."""
    return len(state.applications) % SUBMISSIONS_PER_LEVEL, SUBMISSIONS_PER_LEVEL


# ── Check-in ─────────────────────────────────────────────────────────────


def check_in(state: GameState, catalog: JobCatalog, now: datetime) -> CommandResult:
    last = parse_iso(state.last_check_in) if state.last_check_in else None
    if last is not None and same_day(last, now):
        raise AlreadyCheckedIn()

    streak = state.streak + 1 if last is not None and is_previous_day(last, now) else 1

    work = _copy(state)
    work.streak = streak
    work.best_streak = max(work.best_streak, streak)
    work.xp += DAILY_CHECKIN_XP
    work.last_check_in = to_iso(now)
    log.debug("Check-in: streak %d → %d (best %d)", state.streak, streak, work.best_streak)

    events = [
        Event(
            kind="xp",
            message=f"Checked in! +{DAILY_CHECKIN_XP} XP. Streak: {streak} days!",
            data={"xp": DAILY_CHECKIN_XP, "streak": streak},
        )
    ]
    return _finish(work, dict(catalog), events, now)


# ── Quests ───────────────────────────────────────────────────────────────


def submit_job(
    state: GameState, catalog: JobCatalog, job_id: str, now: datetime
) -> CommandResult:
    if job_id in state.applications:
        raise AlreadySubmitted(job_id)
    job = catalog.get(job_id)
    if job is None:
        raise UnknownJob(job_id)

    first_today = not any(
        same_day(parse_iso(app.submitted_at), now) for app in state.applications.values()
    )

    work = _copy(state)
    work.applications[job_id] = Application(
        job_id=job.id,
        job_title=job.title,
        company=job.company,
        status=ApplicationStatus.SUBMITTED,
        submitted_at=to_iso(now),
        follow_ups=followups.schedule_follow_ups(job.id, now),
    )
    work.saved_jobs = [jid for jid in work.saved_jobs if jid != job_id]
    work.xp += SUBMIT_XP
    _with_level(work)
    log.debug("Submitted %s (%s @ %s)", job_id, job.title, job.company)

    events: list[Event] = []
    if first_today:
        events.append(
            Event(kind="first_quest_today", message="First quest of the day!", data={"job_id": job_id})
        )
    if work.level > state.level:
        events.append(
            Event(
                kind="level_up",
                message=f"LEVEL UP! You are now Level {work.level}!",
                data={"level": work.level},
            )
        )
    events.append(
        Event(kind="xp", message=f"Quest submitted! +{SUBMIT_XP} XP", data={"xp": SUBMIT_XP})
    )
    return _finish(work, dict(catalog), events, now)


def new_job_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=7))
    return f"job-{int(time.time() * 1000)}-{suffix}"


def _coerce_tags(raw: Any) -> list[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        raw = raw.split(",")
    return [str(t).strip() for t in raw if str(t).strip()]


def _coerce_bool(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes", "y")
    return bool(raw)


def _coerce_rarity(raw: Any) -> int:
    try:
        rarity = int(raw or MIN_RARITY)
    except (TypeError, ValueError):
        return MIN_RARITY
    return max(MIN_RARITY, min(MAX_RARITY, rarity))


def build_job(job_data: dict[str, Any], job_id: str) -> Job:
    """Fill a partial, untrusted job record with defaults."""

    def text(key: str) -> str:
        value = job_data.get(key)
        return str(value).strip() if value else JOB_DEFAULTS[key]

    return Job(
        id=job_id,
        title=text("title"),
        company=text("company"),
        location=text("location"),
        url=text("url"),
        tags=_coerce_tags(job_data.get("tags")),
        description=text("description"),
        remote=_coerce_bool(job_data.get("remote", False)),
        rarity=_coerce_rarity(job_data.get("rarity")),
        source=job_data.get("source") or None,
        emoji=job_data.get("emoji") or None,
        type=job_data.get("type") or None,
    )


def add_job(
    state: GameState,
    catalog: JobCatalog,
    job_data: dict[str, Any],
    action: str,
    now: datetime,
    id_factory: Callable[[], str] = new_job_id,
) -> CommandResult:
    if action not in ADD_ACTIONS:
        raise ValueError(f"Unknown add action {action!r} (expected one of {ADD_ACTIONS})")

    job_id = id_factory()
    while job_id in catalog:
        job_id = id_factory()
    job = build_job(job_data, job_id)

    work_catalog = dict(catalog)
    work_catalog[job.id] = job
    log.debug("Added quest %s (%s) action=%s", job.id, job.title, action)

    if action == "submit":
        result = submit_job(state, work_catalog, job.id, now)
        result.events.insert(0, Event(kind="info", message="Quest added!", data={"job_id": job.id}))
        return result

    work = _copy(state)
    work.saved_jobs.append(job.id)
    events = [Event(kind="info", message="Quest saved successfully!", data={"job_id": job.id})]
    return _finish(work, work_catalog, events, now)


def delete_saved_job(
    state: GameState, catalog: JobCatalog, job_id: str, now: datetime
) -> CommandResult:
    if job_id not in state.saved_jobs and job_id not in catalog:
        raise UnknownJob(job_id)

    work = _copy(state)
    work.saved_jobs = [jid for jid in work.saved_jobs if jid != job_id]
    work_catalog = dict(catalog)
    if job_id not in work.applications:
        work_catalog.pop(job_id, None)

    events = [Event(kind="info", message="Saved quest deleted.", data={"job_id": job_id})]
    return _finish(work, work_catalog, events, now)


# ── Daily missions ───────────────────────────────────────────────────────


def daily_mission_reset(state: GameState, now: datetime) -> GameState:
    """Clear mission ticks when the stored reset day is not today.

    Returns ``state`` itself when nothing changes, otherwise a new copy.
    """
    today = day_key(now)
    if state.last_mission_reset == today:
        return state
    work = _copy(state)
    work.daily_missions = {}
    work.last_mission_reset = today
    log.debug("Daily missions reset for %s", today)
    return work


def complete_mission(
    state: GameState, catalog: JobCatalog, mission_id: str, now: datetime
) -> CommandResult:
    mission = MISSIONS_BY_ID.get(mission_id)
    if mission is None:
        raise InvalidMissionId(mission_id)

    work = daily_mission_reset(state, now)
    if work.daily_missions.get(mission_id):
        return CommandResult(state=work, catalog=dict(catalog), events=[])
    if work is state:
        work = _copy(state)

    work.daily_missions[mission_id] = True
    work.xp += mission.xp
    events = [
        Event(
            kind="xp",
            message=f"Mission Complete! +{mission.xp} XP",
            data={"xp": mission.xp, "mission_id": mission_id},
        )
    ]
    return _finish(work, dict(catalog), events, now)


# ── Applications ─────────────────────────────────────────────────────────


def _merge_follow_ups(stored: list[FollowUp], updated: list[FollowUp]) -> list[FollowUp]:
    """Keep the scheduled follow-ups; take edits to completion and snooze only.

    Completion never reverts and due dates never move.
    """
    by_id = {fu.id: fu for fu in updated}
    merged: list[FollowUp] = []
    for fu in stored:
        new = by_id.get(fu.id)
        if new is None:
            merged.append(fu)
            continue
        merged.append(
            replace(fu, completed=fu.completed or new.completed, snoozed_until=new.snoozed_until)
        )
    return merged


def update_application(
    state: GameState,
    catalog: JobCatalog,
    job_id: str,
    updated: Application,
    now: datetime,
) -> CommandResult:
    current = state.applications.get(job_id)
    if current is None:
        raise UnknownJob(job_id)
    validate_transition(current.status, updated.status)

    work = _copy(state)
    work.applications[job_id] = Application(
        job_id=current.job_id,
        job_title=updated.job_title or current.job_title,
        company=updated.company or current.company,
        status=updated.status,
        submitted_at=current.submitted_at,
        follow_ups=_merge_follow_ups(current.follow_ups, updated.follow_ups),
    )
    _with_level(work)

    events: list[Event] = []
    if current.status != ApplicationStatus.REJECTED and updated.status == ApplicationStatus.REJECTED:
        work.xp += REJECTED_XP
        events.append(
            Event(
                kind="xp",
                message=f"Quest log updated. +{REJECTED_XP} XP for persistence!",
                data={"xp": REJECTED_XP},
            )
        )
    elif current.status != updated.status:
        events.append(
            Event(
                kind="info",
                message=f"Quest log updated: {updated.status.value}.",
                data={"job_id": job_id, "status": updated.status.value},
            )
        )
    log.debug("Application %s: %s → %s", job_id, current.status.value, updated.status.value)
    return _finish(work, dict(catalog), events, now)


def set_status(
    state: GameState,
    catalog: JobCatalog,
    job_id: str,
    status: ApplicationStatus,
    now: datetime,
) -> CommandResult:
    """Shortcut for ``update_application`` that only changes the status."""
    current = state.applications.get(job_id)
    if current is None:
        raise UnknownJob(job_id)
    return update_application(state, catalog, job_id, replace(current, status=status), now)


def complete_follow_up(
    state: GameState,
    catalog: JobCatalog,
    job_id: str,
    follow_up_id: str,
    now: datetime,
) -> CommandResult:
    current = state.applications.get(job_id)
    if current is None:
        raise UnknownJob(job_id)
    updated = replace(current, follow_ups=followups.complete(current, follow_up_id))
    result = update_application(state, catalog, job_id, updated, now)
    result.events.insert(0, Event(kind="info", message="Follow-up complete!", data={"follow_up_id": follow_up_id}))
    return result


def snooze_follow_up(
    state: GameState,
    catalog: JobCatalog,
    job_id: str,
    follow_up_id: str,
    now: datetime,
    days: int = DEFAULT_SNOOZE_DAYS,
) -> CommandResult:
    current = state.applications.get(job_id)
    if current is None:
        raise UnknownJob(job_id)
    updated = replace(current, follow_ups=followups.snooze(current, follow_up_id, now, days))
    result = update_application(state, catalog, job_id, updated, now)
    result.events.insert(
        0,
        Event(
            kind="info",
            message=f"Follow-up snoozed for {days} days.",
            data={"follow_up_id": follow_up_id, "days": days},
        ),
    )
    return result


# ── Profile ──────────────────────────────────────────────────────────────


def reset_profile() -> CommandResult:
    return CommandResult(
        state=initial_state(),
        catalog={},
        events=[Event(kind="warning", message="All data for this profile has been reset.")],
    )
