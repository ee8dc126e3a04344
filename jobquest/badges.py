"""Badge registry and evaluator.

Each badge carries a pure predicate ``(state, catalog, now) -> bool``. The
evaluator runs after every state-changing command against the resulting
state, skips badges that are already unlocked and appends the newly
satisfied ones. Unlocks are permanent.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from jobquest.clock import parse_iso, same_day
from jobquest.log import get_logger
from jobquest.models import Application, Event, GameState, JobCatalog

log = get_logger(__name__)

Criteria = Callable[[GameState, JobCatalog, datetime], bool]

RONIN_KEYWORDS: tuple[str, ...] = ("japanese", "localization")


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    emoji: str
    criteria: Criteria


def _submitted_today(state: GameState, now: datetime) -> list[Application]:
    return [
        app for app in state.applications.values()
        if same_day(parse_iso(app.submitted_at), now)
    ]


def _speed_runner(state: GameState, catalog: JobCatalog, now: datetime) -> bool:
    return len(_submitted_today(state, now)) >= 5


def _unbroken(state: GameState, catalog: JobCatalog, now: datetime) -> bool:
    return state.streak >= 7


def _ronin(state: GameState, catalog: JobCatalog, now: datetime) -> bool:
    count = 0
    for app in _submitted_today(state, now):
        job = catalog.get(app.job_id)
        if job is None:
            continue
        text = job.search_text()
        if any(word in text for word in RONIN_KEYWORDS):
            count += 1
    return count >= 3


def _followup_ninja(state: GameState, catalog: JobCatalog, now: datetime) -> bool:
    week_ago = now - timedelta(days=7)
    recent = [
        fu
        for app in state.applications.values()
        for fu in app.follow_ups
        if fu.completed and week_ago <= parse_iso(fu.due_date) <= now
    ]
    return len(recent) >= 3


BADGES: tuple[Badge, ...] = (
    Badge("speed_runner", "Speed Runner", "Submit 5 applications in one day.", "\U0001f3c3", _speed_runner),
    Badge("unbroken", "Unbroken", "Achieve a 7-day check-in streak.", "⛓️", _unbroken),
    Badge("ronin", "Ronin", "Submit 3+ Japanese/Localization jobs in one day.", "⛩️", _ronin),
    Badge("followup_ninja", "Follow-Up Ninja", "Complete 3 follow-ups in a week.", "\U0001f977", _followup_ninja),
)

BADGES_BY_ID: dict[str, Badge] = {b.id: b for b in BADGES}


def newly_satisfied(state: GameState, catalog: JobCatalog, now: datetime) -> list[Badge]:
    """Badges not yet unlocked whose criteria now hold. Read-only."""
    unlocked = set(state.unlocked_badges)
    return [b for b in BADGES if b.id not in unlocked and b.criteria(state, catalog, now)]


def evaluate_badges(state: GameState, catalog: JobCatalog, now: datetime) -> list[Event]:
    """Unlock newly satisfied badges on ``state`` in place and report them.

    Callers pass a state they own (the engine's working copy).
    """
    events: list[Event] = []
    for badge in newly_satisfied(state, catalog, now):
        state.unlocked_badges.append(badge.id)
        log.info("Badge unlocked: %s", badge.id)
        events.append(
            Event(
                kind="badge_unlocked",
                message=f"Badge Unlocked: {badge.name}!",
                data={"badge_id": badge.id},
            )
        )
    return events
