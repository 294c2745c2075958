"""Data models for postings, the preference profile and feedback."""
from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field, fields
from datetime import datetime, timezone
from typing import Any

from pathfinder.config import DEFAULT_PREFERENCES, DEFAULT_WEIGHTS

WEIGHT_KEYS: tuple[str, ...] = tuple(DEFAULT_WEIGHTS)


@dataclass
class Posting:
    id: str
    title: str
    company: str
    location: str
    url: str
    source: str
    posted_at: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    salary_min: float | None = None
    salary_max: float | None = None
    work_type: str | None = None
    seniority: str | None = None
    remote: bool = False
    hybrid: bool = False
    raw: dict = field(default_factory=dict, repr=False, compare=False)

    @property
    def key(self) -> tuple[str, str]:
        """Dedup identity: ids are only unique within their source."""
        return (self.source, self.id)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data.pop("raw")
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Posting:
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        kwargs["tags"] = list(kwargs.get("tags") or [])
        return cls(**kwargs)


@dataclass
class Preferences:
    keywords: list[str] = field(default_factory=list)
    blocked_keywords: list[str] = field(default_factory=list)
    preferred_locations: list[str] = field(default_factory=list)
    excluded_locations: list[str] = field(default_factory=list)
    min_salary: float | None = None
    work_types: list[str] = field(default_factory=list)
    industries: list[str] = field(default_factory=list)
    seniority: list[str] = field(default_factory=list)
    remote_only: bool = False
    academia: bool = False
    consulting: bool = False
    public_sector: bool = False
    private_sector: bool = False
    weights: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))

    def weight(self, factor: str) -> float:
        return self.weights.get(factor, DEFAULT_WEIGHTS[factor])

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None, defaults: dict[str, Any] | None = None) -> Preferences:
        """Build a complete profile from possibly partial stored data.

        Missing fields come from *defaults* (the built-in profile when not
        given). Weights are restricted to the known factor names, with any
        missing factor filled from the defaults. A field of the wrong type
        raises ``TypeError`` so callers can fall back to the defaults.
        """
        base = copy.deepcopy(defaults if defaults is not None else DEFAULT_PREFERENCES)
        data = data or {}
        if not isinstance(data, dict):
            raise TypeError(f"Preferences must be a mapping, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        merged = {k: v for k, v in base.items() if k in known}
        merged.update({k: copy.deepcopy(v) for k, v in data.items() if k in known and k != "weights"})
        for name, value in merged.items():
            _check_field(name, value)

        weights = dict(DEFAULT_WEIGHTS)
        weights.update(_weights(base.get("weights")))
        weights.update(_weights(data.get("weights")))
        merged["weights"] = weights
        return cls(**merged)


_LIST_FIELDS = frozenset({
    "keywords", "blocked_keywords", "preferred_locations", "excluded_locations",
    "work_types", "industries", "seniority",
})
_FLAG_FIELDS = frozenset({"remote_only", "academia", "consulting", "public_sector", "private_sector"})


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_field(name: str, value: Any) -> None:
    if name in _LIST_FIELDS:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise TypeError(f"{name} must be a list of strings, got {value!r}")
    elif name in _FLAG_FIELDS:
        if not isinstance(value, bool):
            raise TypeError(f"{name} must be true or false, got {value!r}")
    elif name == "min_salary":
        if value is not None and not _is_number(value):
            raise TypeError(f"min_salary must be a number or empty, got {value!r}")


def _weights(raw: Any) -> dict[str, float]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise TypeError(f"weights must be a mapping, got {type(raw).__name__}")
    out: dict[str, float] = {}
    for key, value in raw.items():
        if key not in WEIGHT_KEYS:
            continue
        if not _is_number(value):
            raise TypeError(f"weight {key} must be a number, got {value!r}")
        out[key] = float(value)
    return out


@dataclass
class FeedbackEvent:
    posting_id: str
    liked: bool
    notes: str
    tags: list[str]
    title: str
    when: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeedbackEvent:
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class ScoredPosting:
    posting: Posting
    score: float
    breakdown: dict[str, float] = field(default_factory=dict)

    @property
    def match_reasons(self) -> list[str]:
        return [f"{factor} {value:+.2f}" for factor, value in self.breakdown.items()]
