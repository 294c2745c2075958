"""Adapt the preference profile from like/dislike feedback.

The rules are deliberately simple: a fixed nudge to the keyword weights, the
judged tags copied into the allow- or block-list, and a short table of note
trigger phrases that nudge individual weights or flip sector flags.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from pathfinder.log import get_logger
from pathfinder.models import Posting, Preferences

log = get_logger(__name__)

LIKE_STEP = 0.15
DISLIKE_STEP = -0.12
KEYWORD_STEP = 0.05

WEIGHT_BOUNDS: dict[str, tuple[float, float]] = {
    "keywordMatch": (0.6, 2.2),
    "negativeKeyword": (-3.0, -0.6),
    "salary": (0.2, 2.4),
    "remote": (0.0, 1.4),
    "seniority": (0.2, 2.0),
}

# (trigger substrings, weight nudged by the like/dislike step)
NOTE_WEIGHT_TRIGGERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("salary", "pay"), "salary"),
    (("remote", "hybrid"), "remote"),
    (("leadership", "manager", "director"), "seniority"),
)

# (trigger substrings, sector flag overwritten with the liked value)
NOTE_FLAG_TRIGGERS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("consult",), "consulting"),
    (("university", "academic"), "academia"),
)


def clamp(n: float, low: float, high: float) -> float:
    return max(low, min(high, n))


def _nudge(weights: dict[str, float], prefs: Preferences, factor: str, delta: float) -> None:
    low, high = WEIGHT_BOUNDS[factor]
    weights[factor] = clamp(prefs.weight(factor) + delta, low, high)


def _merge_terms(existing: list[str], new_terms: Iterable[str]) -> list[str]:
    merged = list(existing)
    seen = {t.lower() for t in merged}
    for term in new_terms:
        t = term.lower()
        if t and t not in seen:
            merged.append(t)
            seen.add(t)
    return merged


def learn_from_feedback(
    prefs: Preferences,
    posting: Posting,
    liked: bool,
    notes: str,
    selected_tags: Iterable[str],
) -> Preferences:
    """Return a new profile adjusted for one judgement; *prefs* is left untouched."""
    step = LIKE_STEP if liked else DISLIKE_STEP
    weights = dict(prefs.weights)

    if liked:
        _nudge(weights, prefs, "keywordMatch", KEYWORD_STEP)
    else:
        _nudge(weights, prefs, "negativeKeyword", -KEYWORD_STEP)

    tags = list(selected_tags) or list(posting.tags)
    keywords = list(prefs.keywords)
    blocked = list(prefs.blocked_keywords)
    if liked:
        keywords = _merge_terms(keywords, tags)
    else:
        blocked = _merge_terms(blocked, tags)

    flags: dict[str, bool] = {}
    text = (notes or "").lower()
    for triggers, factor in NOTE_WEIGHT_TRIGGERS:
        if any(t in text for t in triggers):
            _nudge(weights, prefs, factor, step)
    for triggers, flag in NOTE_FLAG_TRIGGERS:
        if any(t in text for t in triggers):
            flags[flag] = liked

    log.debug(
        "Feedback on %s (%s): %d tag(s), flags=%s",
        posting.id, "liked" if liked else "disliked", len(tags), flags,
    )
    return replace(
        prefs,
        keywords=keywords,
        blocked_keywords=blocked,
        preferred_locations=list(prefs.preferred_locations),
        excluded_locations=list(prefs.excluded_locations),
        work_types=list(prefs.work_types),
        industries=list(prefs.industries),
        seniority=list(prefs.seniority),
        weights=weights,
        **flags,
    )
