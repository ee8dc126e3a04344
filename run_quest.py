#!/usr/bin/env python3
"""
Command-line entry point for Job Quest.

    python run_quest.py checkin
    python run_quest.py add --title "Localization PM" --company Acme --tags japanese,loc
    python run_quest.py add --reply-file reply.json --submit
    python run_quest.py submit job-1700000000000-abc1234
    python run_quest.py mission check_linkedin
    python run_quest.py status job-... interview
    python run_quest.py followup due
    python run_quest.py report --write

Use ``--profile`` (or JOBQUEST_PROFILE) to pick the player.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobquest import engine
from jobquest.config import (
    active_profile_id,
    data_dir,
    ensure_dirs,
    load_profiles,
    snooze_days,
)
from jobquest.errors import ImportParseError
from jobquest.importers import get_importer
from jobquest.log import get_logger, set_console_level
from jobquest.models import ApplicationStatus, Event, Profile
from jobquest.report import build_progress_report, write_progress_report
from jobquest.rules import DAILY_MISSIONS
from jobquest.session import QuestSession
from jobquest.store import JsonFileStore

log = get_logger(__name__)

_ICONS = {
    "xp": "+",
    "level_up": "★",
    "first_quest_today": "\U0001f389",
    "badge_unlocked": "\U0001f3c5",
    "info": "·",
    "warning": "!",
    "error": "✗",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Job Quest — your job search as a game")
    parser.add_argument("--profile", help="Profile id (default: JOBQUEST_PROFILE or the first profile)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("checkin", help="Daily check-in (+XP, extends your streak)")

    add = sub.add_parser("add", help="Add a quest to your catalog")
    add.add_argument("--title")
    add.add_argument("--company")
    add.add_argument("--location")
    add.add_argument("--url")
    add.add_argument("--tags", help="Comma-separated tags")
    add.add_argument("--description")
    add.add_argument("--remote", action="store_true")
    add.add_argument("--rarity", type=int)
    add.add_argument("--reply-file", type=Path, help="JSON reply from the job-parsing service")
    add.add_argument("--csv", type=Path, help="CSV export, one quest per row")
    add.add_argument("--submit", action="store_true", help="Submit right away instead of saving")

    submit = sub.add_parser("submit", help="Submit a saved quest")
    submit.add_argument("job_id")

    mission = sub.add_parser("mission", help="List or complete daily missions")
    mission.add_argument("mission_id", nargs="?")

    status = sub.add_parser("status", help="Update an application's status")
    status.add_argument("job_id")
    status.add_argument("status", help="e.g. 'In Review', interview, offer, hired, rejected, no_response")

    fu = sub.add_parser("followup", help="Follow-up reminders")
    fu.add_argument("action", choices=["due", "complete", "snooze"])
    fu.add_argument("job_id", nargs="?")
    fu.add_argument("follow_up_id", nargs="?")
    fu.add_argument("--days", type=int, help="Snooze span in days")

    delete = sub.add_parser("delete", help="Delete a saved quest")
    delete.add_argument("job_id")

    reset = sub.add_parser("reset", help="Erase all data for the profile")
    reset.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    report = sub.add_parser("report", help="Print a progress report")
    report.add_argument("--write", action="store_true", help="Also save it under reports/")

    sub.add_parser("profiles", help="List configured profiles")
    return parser.parse_args(argv)


def _print_events(events: list[Event]) -> int:
    failed = False
    for e in events:
        print(f"  {_ICONS.get(e.kind, '·')} {e.message}")
        if e.kind == "error":
            failed = True
    return 1 if failed else 0


def _job_data_from_flags(args: argparse.Namespace) -> dict:
    data: dict = {
        "title": args.title,
        "company": args.company,
        "location": args.location,
        "url": args.url,
        "tags": args.tags,
        "description": args.description,
        "remote": args.remote,
        "rarity": args.rarity,
        "source": "Manual",
    }
    return {k: v for k, v in data.items() if v not in (None, "")}


def _cmd_add(session: QuestSession, args: argparse.Namespace) -> int:
    action = "submit" if args.submit else "save"
    if args.reply_file or args.csv:
        kind, path = ("reply", args.reply_file) if args.reply_file else ("csv", args.csv)
        try:
            records = get_importer(kind).parse(path.read_text(encoding="utf-8"))
        except (OSError, ImportParseError) as exc:
            print(f"  ✗ {exc}")
            return 1
    else:
        records = [_job_data_from_flags(args)]

    rc = 0
    for record in records:
        rc |= _print_events(session.add_job(record, action))
    return rc


def _cmd_missions(session: QuestSession, args: argparse.Namespace) -> int:
    if args.mission_id:
        return _print_events(session.complete_mission(args.mission_id))
    done = engine.daily_mission_reset(session.state, session.now()).daily_missions
    for m in DAILY_MISSIONS:
        mark = "✓" if done.get(m.id) else " "
        print(f"  [{mark}] {m.id:<22} {m.name} (+{m.xp} XP)")
    return 0


def _cmd_followup(session: QuestSession, args: argparse.Namespace) -> int:
    if args.action == "due":
        due = session.due_follow_ups()
        if not due:
            print("  No follow-ups due. Nice!")
        for fu, app in due:
            print(f"  {fu.due_date[:10]}  {app.job_title} @ {app.company}  ({app.job_id} {fu.id})")
        return 0
    if not args.job_id or not args.follow_up_id:
        print("  ✗ followup complete/snooze needs JOB_ID and FOLLOW_UP_ID")
        return 2
    if args.action == "complete":
        return _print_events(session.complete_follow_up(args.job_id, args.follow_up_id))
    return _print_events(session.snooze_follow_up(args.job_id, args.follow_up_id, args.days))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        set_console_level("DEBUG")

    ensure_dirs()
    profiles = [Profile.from_dict(p) for p in load_profiles()]

    if args.command == "profiles":
        for p in profiles:
            roles = ", ".join(p.preferences.preferred_roles) or "—"
            print(f"  {p.id:<12} {p.name:<16} roles: {roles}")
        return 0

    profile_id = args.profile or active_profile_id([p.to_dict() for p in profiles])
    profile = next((p for p in profiles if p.id == profile_id), None)
    if profile is None:
        print(f"  ✗ Unknown profile {profile_id!r}. Run: python run_quest.py profiles")
        return 1

    session = QuestSession(JsonFileStore(data_dir() / "store"), profile.id, snooze_days=snooze_days())

    if args.command == "checkin":
        return _print_events(session.check_in())
    if args.command == "add":
        return _cmd_add(session, args)
    if args.command == "submit":
        return _print_events(session.submit(args.job_id))
    if args.command == "mission":
        return _cmd_missions(session, args)
    if args.command == "status":
        try:
            status = ApplicationStatus.parse(args.status)
        except ValueError as exc:
            print(f"  ✗ {exc}")
            return 2
        return _print_events(session.set_status(args.job_id, status))
    if args.command == "followup":
        return _cmd_followup(session, args)
    if args.command == "delete":
        return _print_events(session.delete_saved_job(args.job_id))
    if args.command == "reset":
        if not args.yes:
            answer = input(f"  Erase ALL data for {profile.name}? This cannot be undone (y/N): ")
            if answer.strip().lower() not in ("y", "yes"):
                print("  Cancelled.")
                return 0
        return _print_events(session.reset())
    if args.command == "report":
        content = build_progress_report(profile, session.state, session.catalog, session.now())
        print(content)
        if args.write:
            write_progress_report(content, profile.id, session.now())
        return 0

    log.error("Unhandled command %s", args.command)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
