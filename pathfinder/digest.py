"""Markdown digest of the best-ranked postings."""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlparse

from pathfinder.config import REPORTS_DIR
from pathfinder.log import get_logger
from pathfinder.models import FeedbackEvent, ScoredPosting
from pathfinder.scorer import days_since, UNKNOWN_AGE_DAYS

log = get_logger(__name__)


def _short_url_label(url: str) -> str:
    host = (urlparse(url).hostname or "").replace("www.", "")
    parts = host.split(".")
    return parts[0].capitalize() if parts and parts[0] else "Link"


def _age_label(posted_at: str | None, now: datetime) -> str:
    age = days_since(posted_at, now)
    if age == UNKNOWN_AGE_DAYS:
        return "date unknown"
    return "today" if age == 0 else f"{age}d ago"


def _truncate(text: str, width: int) -> str:
    return text[:width] + ("…" if len(text) > width else "")


def build_digest(
    ranked: list[ScoredPosting],
    *,
    limit: int = 10,
    feedback: list[FeedbackEvent] | None = None,
    now: datetime | None = None,
) -> str:
    now = now or datetime.now(timezone.utc)
    date = now.strftime("%Y-%m-%d")
    lines: list[str] = [f"# Pathfinder Digest — {date}", ""]

    top = ranked[:limit]
    lines.append(f"**{len(ranked)}** postings ranked | showing top **{len(top)}**")
    lines.append("")

    if not top:
        lines.append("_No postings matched this search._")
        lines.append("")

    for i, s in enumerate(top, 1):
        p = s.posting
        lines.append(f"### {i}. {p.title} @ {p.company}")
        lines.append(f"- **Score:** {s.score:.2f} ({_age_label(p.posted_at, now)}, {p.source})")
        lines.append(f"- **Location:** {p.location}")
        if s.match_reasons:
            lines.append(f"- **Why:** {', '.join(s.match_reasons)}")
        if p.tags:
            lines.append(f"- **Tags:** {', '.join(p.tags[:8])}")
        if p.url:
            lines.append(f"- **Link:** [{_short_url_label(p.url)}]({p.url})")
        lines.append("")

    if top:
        lines.append("---")
        lines.append("")
        lines.append("| # | Role | Company | Location | Score |")
        lines.append("|--:|------|---------|----------|------:|")
        for i, s in enumerate(top, 1):
            p = s.posting
            lines.append(
                f"| {i} | {_truncate(p.title, 40)} | {_truncate(p.company, 22)} "
                f"| {_truncate(p.location, 18)} | {s.score:.2f} |"
            )
        lines.append("")

    if feedback:
        liked = sum(1 for e in feedback if e.liked)
        lines.append("---")
        lines.append("")
        lines.append(f"## Feedback so far: {liked} liked, {len(feedback) - liked} disliked")
        lines.append("")
        for e in feedback[-5:]:
            mark = "\U0001f44d" if e.liked else "\U0001f44e"
            note = f" — _{e.notes}_" if e.notes else ""
            lines.append(f"- {mark} {e.title}{note}")
        lines.append("")

    log.info("Built digest: %d postings ranked, %d shown", len(ranked), len(top))
    return "\n".join(lines)


def write_digest(content: str, reports_dir: Path | None = None) -> Path:
    reports_dir = reports_dir or REPORTS_DIR
    reports_dir.mkdir(parents=True, exist_ok=True)
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    path = reports_dir / f"digest_{date}.md"
    path.write_text(content, encoding="utf-8")
    log.info("Digest written → %s", path)
    return path
