"""Follow-up scheduling: which reminders are pending, overdue or snoozed.

Pure functions over ``FollowUp`` values. Mutators return a new list in which
only the targeted entry is replaced; the other entries are the same objects.
"""
from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

from jobquest.clock import add_days, parse_iso, to_iso
from jobquest.errors import InvalidSnoozeSpan, UnknownFollowUp
from jobquest.models import Application, FollowUp, GameState
from jobquest.rules import DEFAULT_SNOOZE_DAYS, FOLLOW_UP_OFFSETS


def schedule_follow_ups(job_id: str, submitted_at: datetime) -> list[FollowUp]:
    return [
        FollowUp(id=f"{job_id}-fu{i}", due_date=to_iso(add_days(submitted_at, offset)))
        for i, offset in enumerate(FOLLOW_UP_OFFSETS, 1)
    ]


def is_snoozed(fu: FollowUp, now: datetime) -> bool:
    return fu.snoozed_until is not None and parse_iso(fu.snoozed_until) > now


def is_pending(fu: FollowUp, now: datetime) -> bool:
    return not fu.completed and not is_snoozed(fu, now)


def is_overdue(fu: FollowUp, now: datetime) -> bool:
    return is_pending(fu, now) and parse_iso(fu.due_date) < now


def next_pending(application: Application, now: datetime) -> FollowUp | None:
    """Earliest-due pending follow-up; list order breaks ties."""
    pending = [fu for fu in application.follow_ups if is_pending(fu, now)]
    if not pending:
        return None
    # min() keeps the first of equal keys, so list order wins ties
    return min(pending, key=lambda fu: parse_iso(fu.due_date))


def due_follow_ups(state: GameState, now: datetime) -> list[tuple[FollowUp, Application]]:
    """Every overdue follow-up across applications, oldest due date first."""
    due = [
        (fu, app)
        for app in state.applications.values()
        for fu in app.follow_ups
        if is_overdue(fu, now)
    ]
    due.sort(key=lambda pair: parse_iso(pair[0].due_date))
    return due


def _replace_one(
    application: Application, follow_up_id: str, **changes
) -> list[FollowUp]:
    out: list[FollowUp] = []
    found = False
    for fu in application.follow_ups:
        if fu.id == follow_up_id:
            out.append(replace(fu, **changes))
            found = True
        else:
            out.append(fu)
    if not found:
        raise UnknownFollowUp(application.job_id, follow_up_id)
    return out


def complete(application: Application, follow_up_id: str) -> list[FollowUp]:
    """Mark one follow-up done. There is no way back to not-completed."""
    return _replace_one(application, follow_up_id, completed=True)


def snooze(
    application: Application,
    follow_up_id: str,
    now: datetime,
    days: int = DEFAULT_SNOOZE_DAYS,
) -> list[FollowUp]:
    """Hide one follow-up until ``now + days``; due date and completion stay."""
    if days < 1:
        raise InvalidSnoozeSpan(days)
    until = now + timedelta(days=days)
    return _replace_one(application, follow_up_id, snoozed_until=to_iso(until))
