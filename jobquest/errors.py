"""Domain errors raised by engine commands.

Every error is recoverable: the command is rejected, the prior state stays
as it was, and the caller decides how to present it. ``severity`` tells the
dispatcher whether to surface it as a warning or an error event.
"""
from __future__ import annotations


class QuestError(Exception):
    """Base class for rejected commands.

    Attributes:
        code: Machine-readable error code (e.g. ``ALREADY_SUBMITTED``).
        message: Message suitable for showing the player.
        severity: ``warning`` or ``error``.
    """

    def __init__(self, code: str, message: str, severity: str = "error") -> None:
        self.code = code
        self.message = message
        self.severity = severity
        super().__init__(message)


class AlreadyCheckedIn(QuestError):
    def __init__(self) -> None:
        super().__init__(
            code="ALREADY_CHECKED_IN",
            message="You've already checked in today!",
            severity="warning",
        )


class AlreadySubmitted(QuestError):
    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(
            code="ALREADY_SUBMITTED",
            message="You've already submitted this quest!",
            severity="warning",
        )


class UnknownJob(QuestError):
    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__(code="UNKNOWN_JOB", message=f"No quest with id {job_id!r}.")


class InvalidMissionId(QuestError):
    def __init__(self, mission_id: str) -> None:
        self.mission_id = mission_id
        super().__init__(
            code="INVALID_MISSION",
            message=f"Unknown mission {mission_id!r}.",
            severity="warning",
        )


class UnknownFollowUp(QuestError):
    def __init__(self, job_id: str, follow_up_id: str) -> None:
        self.job_id = job_id
        self.follow_up_id = follow_up_id
        super().__init__(
            code="UNKNOWN_FOLLOW_UP",
            message=f"Quest {job_id!r} has no follow-up {follow_up_id!r}.",
        )


class InvalidSnoozeSpan(QuestError):
    def __init__(self, days: int) -> None:
        self.days = days
        super().__init__(
            code="INVALID_SNOOZE_SPAN",
            message=f"Snooze for at least 1 day (got {days}).",
        )


class InvalidStatusTransition(QuestError):
    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(
            code="INVALID_STATUS_TRANSITION",
            message=f"Cannot move an application from {current} back to {target}.",
        )


class ImportParseError(Exception):
    """The job-import collaborator returned something we cannot read."""


class StoreError(Exception):
    """A stored document could not be read or written."""
