"""Data models for profiles, quests (jobs), applications and game state.

Every stored document round-trips through ``to_dict`` / ``from_dict``. The
stored keys are camelCase so existing exports of the browser version of the
game load unchanged.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ApplicationStatus(str, Enum):
    SUBMITTED = "Submitted"
    IN_REVIEW = "In Review"
    INTERVIEW = "Interview"
    OFFER = "Offer"
    HIRED = "Hired"
    REJECTED = "Rejected"
    NO_RESPONSE = "No Response"

    @classmethod
    def parse(cls, value: str) -> "ApplicationStatus":
        """Accept either the stored value ("In Review") or the name ("in_review")."""
        name = value.strip().upper().replace(" ", "_")
        for status in cls:
            if value == status.value or name == status.name:
                return status
        raise ValueError(f"Unknown application status: {value!r}")


@dataclass(frozen=True)
class ProfilePreferences:
    remote_only: bool = False
    keywords: tuple[str, ...] = ()
    preferred_roles: tuple[str, ...] = ()


@dataclass(frozen=True)
class Profile:
    id: str
    name: str
    preferences: ProfilePreferences = field(default_factory=ProfilePreferences)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        prefs = data.get("preferences") or {}
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            preferences=ProfilePreferences(
                remote_only=bool(prefs.get("remote_only", prefs.get("remoteOnly", False))),
                keywords=tuple(dict.fromkeys(prefs.get("keywords") or [])),
                preferred_roles=tuple(
                    dict.fromkeys(prefs.get("preferred_roles", prefs.get("preferredRoles")) or [])
                ),
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "preferences": {
                "remote_only": self.preferences.remote_only,
                "keywords": list(self.preferences.keywords),
                "preferred_roles": list(self.preferences.preferred_roles),
            },
        }


@dataclass
class Job:
    """A quest: one job posting in a profile's catalog."""

    id: str
    title: str
    company: str
    location: str
    url: str
    tags: list[str] = field(default_factory=list)
    description: str = ""
    remote: bool = False
    rarity: int = 1
    source: str | None = None
    emoji: str | None = None
    type: str | None = None

    def search_text(self) -> str:
        return f"{self.title} {self.description} {' '.join(self.tags)}".lower()

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "url": self.url,
            "tags": list(self.tags),
            "description": self.description,
            "remote": self.remote,
            "rarity": self.rarity,
        }
        for key in ("source", "emoji", "type"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Job":
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            company=data.get("company", ""),
            location=data.get("location", ""),
            url=data.get("url", ""),
            tags=list(data.get("tags") or []),
            description=data.get("description", ""),
            remote=bool(data.get("remote", False)),
            rarity=int(data.get("rarity", 1)),
            source=data.get("source"),
            emoji=data.get("emoji"),
            type=data.get("type"),
        )


@dataclass(frozen=True)
class FollowUp:
    id: str
    due_date: str
    completed: bool = False
    snoozed_until: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "dueDate": self.due_date,
            "completed": self.completed,
        }
        if self.snoozed_until is not None:
            out["snoozedUntil"] = self.snoozed_until
        return out

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FollowUp":
        return cls(
            id=str(data["id"]),
            due_date=data["dueDate"],
            completed=bool(data.get("completed", False)),
            snoozed_until=data.get("snoozedUntil"),
        )


@dataclass
class Application:
    job_id: str
    job_title: str
    company: str
    status: ApplicationStatus
    submitted_at: str
    follow_ups: list[FollowUp] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "jobId": self.job_id,
            "jobTitle": self.job_title,
            "company": self.company,
            "status": self.status.value,
            "submittedAt": self.submitted_at,
            "followUps": [fu.to_dict() for fu in self.follow_ups],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Application":
        return cls(
            job_id=str(data["jobId"]),
            job_title=data.get("jobTitle", ""),
            company=data.get("company", ""),
            status=ApplicationStatus.parse(data.get("status") or ApplicationStatus.SUBMITTED.value),
            submitted_at=data["submittedAt"],
            follow_ups=[FollowUp.from_dict(fu) for fu in data.get("followUps") or []],
        )


@dataclass
class GameState:
    xp: int = 0
    level: int = 1
    streak: int = 0
    best_streak: int = 0
    last_check_in: str | None = None
    daily_missions: dict[str, bool] = field(default_factory=dict)
    last_mission_reset: str | None = None
    unlocked_badges: list[str] = field(default_factory=list)
    applications: dict[str, Application] = field(default_factory=dict)
    saved_jobs: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "xp": self.xp,
            "level": self.level,
            "streak": self.streak,
            "bestStreak": self.best_streak,
            "lastCheckIn": self.last_check_in,
            "dailyMissions": dict(self.daily_missions),
            "lastMissionReset": self.last_mission_reset,
            "unlockedBadges": list(self.unlocked_badges),
            "applications": {jid: app.to_dict() for jid, app in self.applications.items()},
            "savedJobs": list(self.saved_jobs),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameState":
        return cls(
            xp=int(data.get("xp", 0)),
            level=int(data.get("level", 1)),
            streak=int(data.get("streak", 0)),
            best_streak=int(data.get("bestStreak", 0)),
            last_check_in=data.get("lastCheckIn"),
            daily_missions={k: bool(v) for k, v in (data.get("dailyMissions") or {}).items()},
            last_mission_reset=data.get("lastMissionReset"),
            unlocked_badges=list(dict.fromkeys(data.get("unlockedBadges") or [])),
            applications={
                jid: Application.from_dict(app)
                for jid, app in (data.get("applications") or {}).items()
            },
            saved_jobs=list(dict.fromkeys(data.get("savedJobs") or [])),
        )


JobCatalog = dict[str, Job]


def catalog_to_dict(catalog: JobCatalog) -> dict[str, Any]:
    return {jid: job.to_dict() for jid, job in catalog.items()}


def catalog_from_dict(data: dict[str, Any] | None) -> JobCatalog:
    return {jid: Job.from_dict(job) for jid, job in (data or {}).items()}


@dataclass(frozen=True)
class Event:
    """Something the caller should show the player.

    ``kind`` is one of: ``xp``, ``level_up``, ``first_quest_today``,
    ``badge_unlocked``, ``info``, ``warning``, ``error``.
    """

    kind: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)
