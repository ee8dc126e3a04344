#!/usr/bin/env python3
"""
Interactive onboarding wizard — create a Job Quest player profile.

    python onboard.py

Walks through: name → search preferences → save to config/profiles.yaml.
"""
from __future__ import annotations

import re
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobquest.config import PROFILES_PATH, ensure_dirs, load_profiles, write_profiles
from jobquest.log import get_logger
from jobquest.models import Profile, ProfilePreferences

log = get_logger(__name__)

# ── Helpers ──────────────────────────────────────────────────────────────


def _ask(prompt: str, default: str = "") -> str:
    hint = f" [{default}]" if default else ""
    val = input(f"  {prompt}{hint}: ").strip()
    return val or default


def _ask_yn(prompt: str, default: bool = True) -> bool:
    hint = "Y/n" if default else "y/N"
    val = input(f"  {prompt} ({hint}): ").strip().lower()
    if not val:
        return default
    return val in ("y", "yes")


def _ask_list(prompt: str, default: list[str] | None = None) -> list[str]:
    raw = _ask(f"{prompt} (comma-separated)", ", ".join(default or []))
    return list(dict.fromkeys(x.strip() for x in raw.split(",") if x.strip()))


def _banner() -> None:
    print()
    print("╔════════════════════════════════════════════╗")
    print("║        Job Quest — New Player Setup        ║")
    print("╚════════════════════════════════════════════╝")
    print()


def _step(num: int, total: int, title: str) -> None:
    print(f"\n{'─'*50}")
    print(f"  Step {num}/{total}: {title}")
    print(f"{'─'*50}")


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "player"


def unique_id(base: str, taken: set[str]) -> str:
    candidate, n = base, 2
    while candidate in taken:
        candidate = f"{base}-{n}"
        n += 1
    return candidate


# ── Steps ────────────────────────────────────────────────────────────────


def step_name(taken: set[str]) -> tuple[str, str]:
    _step(1, 3, "Player")
    name = ""
    while not name:
        name = _ask("Your name")
    profile_id = unique_id(slugify(name), taken)
    print(f"  ✓ Profile id: {profile_id}")
    return profile_id, name


def step_preferences() -> ProfilePreferences:
    _step(2, 3, "Quest preferences")
    print("  These help you spot the quests that fit you best.\n")
    remote_only = _ask_yn("Remote roles only?", default=True)
    keywords = _ask_list("Keywords you care about", ["tech"])
    roles = _ask_list("Preferred roles")
    return ProfilePreferences(
        remote_only=remote_only,
        keywords=tuple(keywords),
        preferred_roles=tuple(roles),
    )


def step_save(profile: Profile, existing: list[dict]) -> Path:
    _step(3, 3, "Save")
    path = write_profiles(existing + [profile.to_dict()])
    print(f"  ✓ Profile saved → {path.relative_to(ROOT) if path.is_relative_to(ROOT) else path}")
    return path


# ── Main ─────────────────────────────────────────────────────────────────


def main() -> None:
    _banner()
    ensure_dirs()

    existing = load_profiles()
    if not PROFILES_PATH.exists():
        print("  Starting from the built-in example players (Erik, Zack).")

    profile_id, name = step_name({p["id"] for p in existing})
    prefs = step_preferences()
    step_save(Profile(id=profile_id, name=name, preferences=prefs), existing)
    log.info("Created profile %s", profile_id)

    print()
    print("╔════════════════════════════════════════════╗")
    print("║            Setup Complete!                 ║")
    print("╚════════════════════════════════════════════╝")
    print()
    print("  Start your first day:")
    print(f"    python run_quest.py --profile {profile_id} checkin")
    print()
    print("  Edit your profile anytime:")
    print("    config/profiles.yaml")
    print()


if __name__ == "__main__":
    main()
