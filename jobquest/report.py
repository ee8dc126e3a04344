"""Generate a markdown progress report for one player."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path

from jobquest.badges import BADGES
from jobquest.clock import day_key, local_date, parse_iso
from jobquest.config import REPORTS_DIR
from jobquest.engine import level_progress
from jobquest.followups import due_follow_ups, next_pending
from jobquest.log import get_logger
from jobquest.models import GameState, JobCatalog, Profile
from jobquest.rules import DAILY_MISSIONS

log = get_logger(__name__)


def _short(text: str, limit: int) -> str:
    return text[:limit] + ("…" if len(text) > limit else "")


def _fmt_day(iso: str) -> str:
    return local_date(parse_iso(iso)).strftime("%b %d, %Y")


def build_progress_report(
    profile: Profile,
    state: GameState,
    catalog: JobCatalog,
    now: datetime,
) -> str:
    done, needed = level_progress(state)
    lines: list[str] = [f"# Job Quest — {profile.name} — {day_key(now)}", ""]

    lines.append(
        f"**Lv. {state.level}** | **{state.xp}** XP | {done} / {needed} quests to next level"
    )
    lines.append(f"Streak: **{state.streak}** days (best {state.best_streak})")
    lines.append("")

    missions_today = state.daily_missions if state.last_mission_reset == day_key(now) else {}
    lines.append("## Daily Missions")
    lines.append("")
    for m in DAILY_MISSIONS:
        mark = "x" if missions_today.get(m.id) else " "
        lines.append(f"- [{mark}] {m.name} (+{m.xp} XP) `{m.id}`")
    lines.append("")

    unlocked = set(state.unlocked_badges)
    lines.append(f"## Badges ({len(unlocked)}/{len(BADGES)})")
    lines.append("")
    for b in BADGES:
        if b.id in unlocked:
            lines.append(f"- {b.emoji} **{b.name}** — {b.description}")
        else:
            lines.append(f"- \U0001f512 {b.name} — _{b.description}_")
    lines.append("")

    due = due_follow_ups(state, now)
    if due:
        lines.append("## Follow-ups Due")
        lines.append("")
        for fu, app in due:
            lines.append(
                f"- **{app.job_title}** @ {app.company} — due {_fmt_day(fu.due_date)} "
                f"(`{app.job_id}` / `{fu.id}`)"
            )
        lines.append("")

    saved = [catalog[jid] for jid in state.saved_jobs if jid in catalog]
    if saved:
        lines.append("## Saved Quests")
        lines.append("")
        for job in saved:
            stars = "★" * job.rarity
            remote = " — Remote" if job.remote else ""
            lines.append(f"- {stars} **{job.title}** @ {job.company}{remote} `{job.id}`")
        lines.append("")

    if state.applications:
        lines.append("## Quest Log")
        lines.append("")
        lines.append("| # | Role | Company | Status | Submitted | Next follow-up |")
        lines.append("|--:|------|---------|--------|-----------|----------------|")
        apps = sorted(state.applications.values(), key=lambda a: parse_iso(a.submitted_at), reverse=True)
        for i, app in enumerate(apps, 1):
            nxt = next_pending(app, now)
            nxt_label = _fmt_day(nxt.due_date) if nxt else "—"
            lines.append(
                f"| {i} | {_short(app.job_title, 40)} | {_short(app.company, 22)} | "
                f"{app.status.value} | {_fmt_day(app.submitted_at)} | {nxt_label} |"
            )
        lines.append("")

    log.info("Built progress report for %s: %d applications", profile.id, len(state.applications))
    return "\n".join(lines)


def write_progress_report(content: str, profile_id: str, now: datetime, reports_dir: Path | None = None) -> Path:
    reports_dir = reports_dir or REPORTS_DIR
    reports_dir.mkdir(parents=True, exist_ok=True)
    path = reports_dir / f"progress_{profile_id}_{day_key(now)}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Report written → %s", path)
    return path
