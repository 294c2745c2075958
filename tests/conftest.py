from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from pathfinder.config import DEFAULT_PREFERENCES
from pathfinder.models import WEIGHT_KEYS, Posting, Preferences
from pathfinder.sources import PostingSource
from pathfinder.store import JsonStore

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_posting(id: str = "1", **overrides) -> Posting:
    data = {
        "id": id,
        "title": "Analyst",
        "company": "Acme",
        "location": "Melbourne",
        "url": f"https://example.com/jobs/{id}",
        "source": "TEST",
    }
    data.update(overrides)
    return Posting(**data)


def days_ago(days: float) -> str:
    return (NOW - timedelta(days=days)).isoformat()


def only_weight(factor: str, value: float = 1.0, **fields) -> Preferences:
    """A profile where every factor but *factor* is switched off."""
    weights = {k: 0.0 for k in WEIGHT_KEYS}
    weights[factor] = value
    return Preferences(weights=weights, **fields)


class StaticSource(PostingSource):
    def __init__(self, name: str, postings: list[Posting]) -> None:
        self.name = name
        self.postings = postings
        self.calls: list[tuple[str, str]] = []

    async def fetch(self, query: str, location: str) -> list[Posting]:
        self.calls.append((query, location))
        return list(self.postings)


class FailingSource(PostingSource):
    def __init__(self, name: str = "BROKEN", exc: Exception | None = None) -> None:
        self.name = name
        self.exc = exc or RuntimeError("upstream unavailable")

    async def fetch(self, query: str, location: str) -> list[Posting]:
        raise self.exc


@pytest.fixture
def default_prefs() -> Preferences:
    return Preferences.from_dict(DEFAULT_PREFERENCES)


@pytest.fixture
def store(tmp_path) -> JsonStore:
    return JsonStore(tmp_path / "data")
