"""Game rules: XP values, leveling and the daily mission list."""
from __future__ import annotations

from dataclasses import dataclass

SUBMIT_XP = 3
DAILY_CHECKIN_XP = 5
REJECTED_XP = 1
MISSION_XP = 2

SUBMISSIONS_PER_LEVEL = 10

# Days after submission at which follow-up reminders fall due
FOLLOW_UP_OFFSETS: tuple[int, ...] = (3, 10)
DEFAULT_SNOOZE_DAYS = 3

MIN_RARITY = 1
MAX_RARITY = 5


@dataclass(frozen=True)
class Mission:
    id: str
    name: str
    xp: int = MISSION_XP


DAILY_MISSIONS: tuple[Mission, ...] = (
    Mission("check_linkedin", "Check LinkedIn for new roles"),
    Mission("check_indeed", "Check Indeed for new roles"),
    Mission("update_resume", "Update Resume/Profile"),
    Mission("connect_professional", "Connect with 1 Professional"),
    Mission("send_followup", "Send 1 Follow-up"),
)

MISSIONS_BY_ID: dict[str, Mission] = {m.id: m for m in DAILY_MISSIONS}


def level_for(submissions: int) -> int:
    return submissions // SUBMISSIONS_PER_LEVEL + 1
