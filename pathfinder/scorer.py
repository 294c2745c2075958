"""Score postings against the preference profile and rank them."""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Iterable

from pathfinder.log import get_logger
from pathfinder.models import Posting, Preferences, ScoredPosting
from pathfinder.tags import ensure_tags

log = get_logger(__name__)

RECENCY_WINDOW_DAYS = 21
UNKNOWN_AGE_DAYS = 999


def _normalize(s: str | None) -> str:
    return (s or "").lower()


def _parse_posted_at(value: str | None) -> datetime | None:
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_since(posted_at: str | None, now: datetime | None = None) -> int:
    """Whole days since *posted_at*; UNKNOWN_AGE_DAYS when absent or unparseable."""
    posted = _parse_posted_at(posted_at)
    if posted is None:
        return UNKNOWN_AGE_DAYS
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    age = math.floor((now - posted).total_seconds() / 86400)
    return max(age, 0)


def _count_hits(terms: Iterable[str], title: str, desc: str) -> int:
    hits = 0
    for term in terms:
        t = term.lower()
        if t in title or t in desc:
            hits += 1
    return hits


def score_breakdown(posting: Posting, prefs: Preferences, now: datetime | None = None) -> dict[str, float]:
    """Per-factor contributions; factors that did not fire are omitted."""
    title = _normalize(posting.title)
    desc = _normalize(posting.description)
    location = _normalize(posting.location)
    parts: dict[str, float] = {}

    kw_hits = _count_hits(prefs.keywords, title, desc)
    if kw_hits:
        parts["keywordMatch"] = kw_hits * prefs.weight("keywordMatch")

    neg_hits = _count_hits(prefs.blocked_keywords, title, desc)
    if neg_hits:
        parts["negativeKeyword"] = neg_hits * prefs.weight("negativeKeyword")

    if any(loc.lower() in location for loc in prefs.preferred_locations):
        parts["locationMatch"] = prefs.weight("locationMatch")

    offered = posting.salary_max or posting.salary_min or 0
    if offered >= (prefs.min_salary or 0):
        parts["salary"] = prefs.weight("salary")

    if posting.work_type and posting.work_type in prefs.work_types:
        parts["workType"] = prefs.weight("workType")

    industries = [i.lower() for i in prefs.industries]
    if any(i in tag.lower() for tag in posting.tags for i in industries):
        parts["industry"] = prefs.weight("industry")

    if posting.seniority and posting.seniority in prefs.seniority:
        parts["seniority"] = prefs.weight("seniority")

    if posting.remote or posting.hybrid:
        parts["remote"] = prefs.weight("remote")

    age = days_since(posting.posted_at, now)
    if age < RECENCY_WINDOW_DAYS:
        parts["recency"] = prefs.weight("recency") * (RECENCY_WINDOW_DAYS - age) / RECENCY_WINDOW_DAYS

    return {factor: value for factor, value in parts.items() if value}


def score_posting(posting: Posting, prefs: Preferences, now: datetime | None = None) -> float:
    return sum(score_breakdown(posting, prefs, now).values())


def score_and_rank(
    postings: Iterable[Posting], prefs: Preferences, now: datetime | None = None
) -> list[ScoredPosting]:
    """Tag, score and order *postings* best first.

    Equal scores keep their input order (``sorted`` is stable).
    """
    now = now or datetime.now(timezone.utc)
    scored: list[ScoredPosting] = []
    for posting in postings:
        tagged = ensure_tags(posting)
        parts = score_breakdown(tagged, prefs, now)
        scored.append(ScoredPosting(posting=tagged, score=sum(parts.values()), breakdown=parts))
    result = sorted(scored, key=lambda s: -s.score)
    log.debug("Ranked %d postings", len(result))
    return result


def rank_postings(postings: Iterable[Posting], prefs: Preferences, now: datetime | None = None) -> list[Posting]:
    return [s.posting for s in score_and_rank(postings, prefs, now)]


def apply_hard_filters(postings: Iterable[Posting], prefs: Preferences) -> list[Posting]:
    """Drop postings ruled out by excluded locations or the remote-only flag."""
    excluded = [loc.lower() for loc in prefs.excluded_locations if loc.strip()]
    kept: list[Posting] = []
    for posting in postings:
        location = _normalize(posting.location)
        if any(loc in location for loc in excluded):
            continue
        if prefs.remote_only and not (posting.remote or "remote" in location):
            continue
        kept.append(posting)
    return kept
