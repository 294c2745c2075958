"""HTML fragments and form values for the posting cards in the Streamlit app."""
from __future__ import annotations

import html
from datetime import datetime

from pathfinder.models import Posting, ScoredPosting
from pathfinder.scorer import days_since, UNKNOWN_AGE_DAYS

LIKE = "👍 More like this"
DISLIKE = "👎 Less like this"
VERDICTS: list[str] = [LIKE, DISLIKE]


def verdict_liked(choice: str | None) -> bool | None:
    """True/False for a chosen verdict, None while nothing is selected."""
    if choice == LIKE:
        return True
    if choice == DISLIKE:
        return False
    return None


def age_label(posting: Posting, now: datetime | None = None) -> str:
    age = days_since(posting.posted_at, now)
    return "date unknown" if age == UNKNOWN_AGE_DAYS else f"{age}d ago"


def pill_labels(posting: Posting) -> list[str]:
    labels = list(posting.tags[:8])
    if posting.salary_min is not None:
        top = f"–{posting.salary_max:,.0f}" if posting.salary_max else ""
        labels.append(f"${posting.salary_min:,.0f}{top}")
    for label in (posting.work_type, posting.seniority):
        if label:
            labels.append(label)
    if posting.remote:
        labels.append("Remote")
    if posting.hybrid:
        labels.append("Hybrid")
    return labels


def card_html(scored: ScoredPosting, now: datetime | None = None) -> str:
    # Adapter text is untrusted; everything interpolated here is escaped.
    p = scored.posting
    esc = html.escape
    pills = "".join(f'<span class="pill">{esc(label)}</span>' for label in pill_labels(p))
    return (
        f'<div class="job-card"><b>{esc(p.title)}</b> — {esc(p.company)}<br>'
        f"<small>{esc(p.location)} · {age_label(p, now)} · {esc(p.source)} · "
        f"score {scored.score:.2f}</small><br>{pills}</div>"
    )
