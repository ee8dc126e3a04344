"""Application lifecycle: Saved → Submitted → any tracked outcome.

Applications are only ever created as ``Submitted``. After that the player
may move between any of the outcome statuses in any order; the only
transition that does not exist is going back to ``Submitted``.
"""
from __future__ import annotations

from jobquest.errors import InvalidStatusTransition
from jobquest.models import ApplicationStatus, GameState

SAVED = "Saved"

END_STATES: frozenset[ApplicationStatus] = frozenset(
    {ApplicationStatus.HIRED, ApplicationStatus.REJECTED}
)


def is_valid_transition(current: ApplicationStatus, target: ApplicationStatus) -> bool:
    if current == target:
        return True
    return target != ApplicationStatus.SUBMITTED


def validate_transition(current: ApplicationStatus, target: ApplicationStatus) -> None:
    if not is_valid_transition(current, target):
        raise InvalidStatusTransition(current.value, target.value)


def valid_targets(current: ApplicationStatus) -> list[ApplicationStatus]:
    return [s for s in ApplicationStatus if s != current and is_valid_transition(current, s)]


def stage_of(state: GameState, job_id: str) -> str | None:
    """``Saved``, the application's status value, or ``None`` if untracked."""
    app = state.applications.get(job_id)
    if app is not None:
        return app.status.value
    if job_id in state.saved_jobs:
        return SAVED
    return None


def is_end_state(status: ApplicationStatus) -> bool:
    """Hired and Rejected close the player's workflow; they stay editable."""
    return status in END_STATES
