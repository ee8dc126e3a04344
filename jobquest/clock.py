"""Date helpers: ISO round-trips and calendar-day comparisons.

Calendar-day rules (streaks, missions, "today" badges) compare dates in the
configured local zone. Follow-up due and snooze checks compare instants.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo

from jobquest.config import timezone_name


def local_zone() -> tzinfo | None:
    """The ``JOBQUEST_TZ`` zone, or ``None`` for the system's own zone rules."""
    name = timezone_name()
    return ZoneInfo(name) if name else None


def _to_local(moment: datetime) -> datetime:
    # astimezone(None) applies the system offset in force at that instant
    return moment.astimezone(local_zone())


def now() -> datetime:
    zone = local_zone()
    return datetime.now(zone) if zone else datetime.now().astimezone()


def _aware(moment: datetime) -> datetime:
    if moment.tzinfo is not None:
        return moment
    zone = local_zone()
    return moment.replace(tzinfo=zone) if zone else moment.astimezone()


def to_iso(moment: datetime) -> str:
    return _aware(moment).isoformat()


def parse_iso(value: str) -> datetime:
    """Parse a stored timestamp; naive values are read as local time."""
    # Older documents carry a trailing "Z" from JavaScript's toISOString()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return _aware(datetime.fromisoformat(value))


def local_date(moment: datetime) -> date:
    if moment.tzinfo is None:
        return moment.date()
    return _to_local(moment).date()


def same_day(a: datetime, b: datetime) -> bool:
    return local_date(a) == local_date(b)


def is_previous_day(earlier: datetime, later: datetime) -> bool:
    """True when ``earlier`` falls on the calendar day right before ``later``."""
    return local_date(later) - local_date(earlier) == timedelta(days=1)


def add_days(moment: datetime, days: int) -> datetime:
    return moment + timedelta(days=days)


def day_key(moment: datetime) -> str:
    """``YYYY-MM-DD`` of the local calendar day, used for mission resets."""
    return local_date(moment).isoformat()
