"""Vocabulary tagging and light title/location heuristics."""
from __future__ import annotations

import re
from dataclasses import replace

from pathfinder.models import Posting

MAX_TAGS = 12

# Declared order is the output order.
TAG_VOCABULARY: tuple[str, ...] = (
    "organisational psychology",
    "behavioural",
    "leadership",
    "culture",
    "od",
    "learning",
    "l&d",
    "people analytics",
    "data",
    "statistics",
    "evaluation",
    "program",
    "policy",
    "consulting",
    "experimental",
    "research",
    "phd",
    "doctorate",
    "university",
    "health",
    "clinical",
    "government",
    "ethics",
    "risk",
    "psychometrics",
    "survey",
)

# First match wins, so broader titles sit lower.
_SENIORITY_TITLES: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Director", re.compile(r"\b(director|head of|chief|vice president|vp)\b", re.I)),
    ("Manager", re.compile(r"\bmanager\b", re.I)),
    ("Lead", re.compile(r"\b(lead|principal)\b", re.I)),
    ("Senior", re.compile(r"\b(senior|sr)\b", re.I)),
    ("Entry", re.compile(r"\b(graduate|junior|entry[\s-]level|intern|internship)\b", re.I)),
)

_REMOTE_MARKERS = ("remote", "work from home", "wfh", "anywhere")


def extract_tags(title: str, description: str | None = None) -> list[str]:
    blob = f"{title} {description or ''}".lower()
    return [term for term in TAG_VOCABULARY if term in blob][:MAX_TAGS]


def ensure_tags(posting: Posting) -> Posting:
    """Return *posting* if it already has tags, else a tagged copy."""
    if posting.tags:
        return posting
    return replace(posting, tags=extract_tags(posting.title, posting.description))


def guess_seniority(title: str) -> str | None:
    for label, pattern in _SENIORITY_TITLES:
        if pattern.search(title or ""):
            return label
    return None


def guess_arrangement(*texts: str | None) -> tuple[bool, bool]:
    """(remote, hybrid) flags from free-text location/description fields."""
    blob = " ".join(t for t in texts if t).lower()
    hybrid = "hybrid" in blob
    remote = not hybrid and any(m in blob for m in _REMOTE_MARKERS)
    return remote, hybrid
