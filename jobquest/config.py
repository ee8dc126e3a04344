"""Load player profiles and env configuration."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobquest.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
PROFILES_PATH: Path = CONFIG_DIR / "profiles.yaml"
REPORTS_DIR: Path = ROOT_DIR / "reports"

DEFAULT_PROFILES: list[dict[str, Any]] = [
    {
        "id": "erik",
        "name": "Erik",
        "preferences": {
            "remote_only": True,
            "keywords": ["ai", "tech", "japanese", "localization"],
            "preferred_roles": ["Community Manager", "Localization", "Content Specialist"],
        },
    },
    {
        "id": "zack",
        "name": "Zack",
        "preferences": {
            "remote_only": True,
            "keywords": ["typescript", "react", "node"],
            "preferred_roles": ["Frontend Developer", "Full Stack Engineer"],
        },
    },
]


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def data_dir() -> Path:
    """Where the key-value store keeps its documents (``JOBQUEST_DATA_DIR``)."""
    raw = get_env("JOBQUEST_DATA_DIR")
    return Path(raw).expanduser() if raw else ROOT_DIR / "data"


def snooze_days() -> int:
    raw = get_env("JOBQUEST_SNOOZE_DAYS", "3")
    try:
        days = int(raw)
    except ValueError:
        log.warning("JOBQUEST_SNOOZE_DAYS=%r is not a number; using 3", raw)
        return 3
    if days < 1:
        log.warning("JOBQUEST_SNOOZE_DAYS must be at least 1; using 3")
        return 3
    return days


def timezone_name() -> str | None:
    """IANA zone used for calendar-day rules; ``None`` means system local time."""
    return get_env("JOBQUEST_TZ") or None


def ensure_dirs() -> None:
    for d in (CONFIG_DIR, REPORTS_DIR, data_dir()):
        d.mkdir(parents=True, exist_ok=True)


def load_profiles(path: Path | None = None) -> list[dict[str, Any]]:
    """Read the profile list, seeding the defaults when the file is missing."""
    path = path or PROFILES_PATH
    if not path.exists():
        log.info("No profiles file at %s, using built-in profiles", path)
        return [dict(p) for p in DEFAULT_PROFILES]

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    # Accept both a bare list and {"profiles": [...]}
    profiles = data.get("profiles", []) if isinstance(data, dict) else data
    if not isinstance(profiles, list):
        raise ValueError(f"Expected a list of profiles in {path}")

    out: list[dict[str, Any]] = []
    for entry in profiles:
        if not isinstance(entry, dict) or not entry.get("id"):
            log.warning("Skipping profile entry without an id: %r", entry)
            continue
        out.append(entry)
    return out


def write_profiles(profiles: list[dict[str, Any]], path: Path | None = None) -> Path:
    path = path or PROFILES_PATH
    path.parent.mkdir(parents=True, exist_ok=True)

    header = (
        "# ============================================================\n"
        "# Job Quest players — one entry per profile\n"
        "# Each profile keeps its own game state and quest catalog\n"
        "# ============================================================\n\n"
    )

    yaml_str = yaml.dump(
        {"profiles": profiles}, default_flow_style=False, sort_keys=False, allow_unicode=True
    )
    path.write_text(header + yaml_str, encoding="utf-8")
    log.info("Profiles written → %s", path)
    return path


def active_profile_id(profiles: list[dict[str, Any]]) -> str:
    """``JOBQUEST_PROFILE`` if set, else the first configured profile."""
    wanted = get_env("JOBQUEST_PROFILE")
    if wanted:
        return wanted
    if not profiles:
        raise ValueError("No profiles configured. Run onboard.py first")
    return profiles[0]["id"]
