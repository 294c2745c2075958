"""
Dashboard state: profile, current results, saved postings and feedback log.

Everything the display layer changes goes through here and is persisted
immediately: search → hard filters → rank → feedback → learned profile.
"""
from __future__ import annotations

import copy
from dataclasses import fields, replace
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from pathfinder.aggregate import SearchSession
from pathfinder.config import DEFAULT_PREFERENCES, get_env, load_default_preferences
from pathfinder.learner import learn_from_feedback
from pathfinder.log import get_logger
from pathfinder.models import WEIGHT_KEYS, FeedbackEvent, Posting, Preferences, ScoredPosting
from pathfinder.scorer import apply_hard_filters, score_and_rank
from pathfinder.sources import Registry, SourceConfig, get_sources, set_enabled
from pathfinder.store import (
    FEEDBACK_LOG_KEY,
    PREFERENCES_KEY,
    SAVED_POSTINGS_KEY,
    SETTINGS_KEY,
    JsonStore,
)

log = get_logger(__name__)

_PREFERENCE_FIELDS = {f.name for f in fields(Preferences)}
DIGEST_INTERVAL = timedelta(days=7)
_DEFAULT_SETTINGS: dict[str, Any] = {"weekly_digest": True, "last_digest": None, "source_overrides": {}}


def _usable_defaults(defaults: dict[str, Any]) -> dict[str, Any]:
    """The configured default profile, or the built-in one if it does not load."""
    try:
        Preferences.from_dict(defaults)
    except (TypeError, ValueError) as exc:
        log.warning("Ignoring preference overrides (%s); using built-in defaults", exc)
        return copy.deepcopy(DEFAULT_PREFERENCES)
    return defaults


class Dashboard:
    def __init__(self, store: JsonStore, sources: Iterable[SourceConfig] | None = None) -> None:
        self.store = store
        self.session = SearchSession()
        self._defaults = _usable_defaults(load_default_preferences())
        self._preferences = self._load_preferences()
        self._settings: dict[str, Any] = store.load(SETTINGS_KEY, _DEFAULT_SETTINGS)
        self._sources = self._apply_enabled(tuple(sources) if sources is not None else get_sources(get_env))

    # ── Preferences ──────────────────────────────────────────────────────

    def _load_preferences(self) -> Preferences:
        stored = self.store.load(PREFERENCES_KEY, self._defaults)
        try:
            return Preferences.from_dict(stored, defaults=self._defaults)
        except (TypeError, ValueError) as exc:
            log.warning("Stored preferences unusable (%s); using defaults", exc)
            return Preferences.from_dict(self._defaults)

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    def _set_preferences(self, prefs: Preferences) -> Preferences:
        self._preferences = prefs
        self.store.save(PREFERENCES_KEY, prefs.to_dict())
        return prefs

    def update_preferences(self, **changes: Any) -> Preferences:
        """Replace any subset of profile fields; ``weights`` is merged per factor."""
        unknown = set(changes) - _PREFERENCE_FIELDS
        if unknown:
            raise ValueError(f"Unknown preference field(s): {', '.join(sorted(unknown))}")

        if "weights" in changes:
            bad = set(changes["weights"]) - set(WEIGHT_KEYS)
            if bad:
                raise ValueError(f"Unknown weight(s): {', '.join(sorted(bad))}")
            changes["weights"] = {
                **self._preferences.weights,
                **{k: float(v) for k, v in changes["weights"].items()},
            }
        for name, value in changes.items():
            if isinstance(value, (list, tuple, set)):
                changes[name] = list(value)
        updated = Preferences.from_dict({**self._preferences.to_dict(), **changes})
        return self._set_preferences(updated)

    def reset_preferences(self) -> Preferences:
        log.info("Preferences reset to defaults")
        return self._set_preferences(Preferences.from_dict(self._defaults))

    # ── Search & ranking ─────────────────────────────────────────────────

    @property
    def postings(self) -> list[Posting]:
        return self.session.postings

    async def search(self, query: str, location: str) -> list[Posting] | None:
        """Run a search; returns None when a newer search overtook this one."""
        return await self.session.run(query, location, self._sources)

    def ranked(self, now: datetime | None = None) -> list[ScoredPosting]:
        candidates = apply_hard_filters(self.postings, self._preferences)
        dropped = len(self.postings) - len(candidates)
        if dropped:
            log.debug("Hard filters removed %d posting(s)", dropped)
        return score_and_rank(candidates, self._preferences, now)

    # ── Feedback ─────────────────────────────────────────────────────────

    def submit_feedback(
        self, posting: Posting, liked: bool, notes: str = "", tags: Iterable[str] = ()
    ) -> FeedbackEvent:
        tags = list(tags)
        self._set_preferences(learn_from_feedback(self._preferences, posting, liked, notes, tags))
        event = FeedbackEvent(
            posting_id=posting.id,
            liked=liked,
            notes=notes,
            tags=tags,
            title=posting.title,
        )
        self.store.append(FEEDBACK_LOG_KEY, event.to_dict())
        log.info("Feedback recorded: %s %s", "👍" if liked else "👎", posting.title)
        return event

    def feedback_log(self) -> list[FeedbackEvent]:
        events: list[FeedbackEvent] = []
        for entry in self.store.load(FEEDBACK_LOG_KEY, []):
            try:
                events.append(FeedbackEvent.from_dict(entry))
            except (TypeError, AttributeError):
                log.debug("Skipping malformed feedback entry: %r", entry)
        return events

    # ── Saved postings ───────────────────────────────────────────────────

    def saved_postings(self) -> list[Posting]:
        saved: list[Posting] = []
        for entry in self.store.load(SAVED_POSTINGS_KEY, []):
            try:
                saved.append(Posting.from_dict(entry))
            except (TypeError, AttributeError):
                log.debug("Skipping malformed saved posting: %r", entry)
        return saved

    def save_posting(self, posting: Posting) -> bool:
        saved = self.saved_postings()
        if any(p.key == posting.key for p in saved):
            return False
        self.store.save(SAVED_POSTINGS_KEY, [p.to_dict() for p in saved] + [posting.to_dict()])
        log.info("Saved posting: %s @ %s", posting.title, posting.company)
        return True

    def remove_saved(self, posting: Posting) -> bool:
        saved = self.saved_postings()
        kept = [p for p in saved if p.key != posting.key]
        if len(kept) == len(saved):
            return False
        self.store.save(SAVED_POSTINGS_KEY, [p.to_dict() for p in kept])
        return True

    # ── Sources & settings ───────────────────────────────────────────────

    def _source_overrides(self) -> dict[str, bool]:
        overrides = self._settings.get("source_overrides")
        if not isinstance(overrides, dict):
            return {}
        return {str(k): bool(v) for k, v in overrides.items()}

    def _apply_enabled(self, registry: Registry) -> Registry:
        # Sources the user never toggled keep their registry default.
        overrides = self._source_overrides()
        return tuple(
            replace(c, enabled=overrides[c.name]) if c.name in overrides else c
            for c in registry
        )

    @property
    def sources(self) -> Registry:
        return self._sources

    def set_source_enabled(self, name: str, enabled: bool) -> Registry:
        self._sources = set_enabled(self._sources, name, enabled)
        self._save_setting("source_overrides", {**self._source_overrides(), name: bool(enabled)})
        return self._sources

    @property
    def weekly_digest(self) -> bool:
        return bool(self._settings.get("weekly_digest", True))

    @weekly_digest.setter
    def weekly_digest(self, value: bool) -> None:
        self._save_setting("weekly_digest", bool(value))

    @property
    def last_digest(self) -> datetime | None:
        stamp = self._settings.get("last_digest")
        if not isinstance(stamp, str):
            return None
        try:
            when = datetime.fromisoformat(stamp)
        except ValueError:
            log.debug("Ignoring malformed last_digest %r", stamp)
            return None
        return when if when.tzinfo else when.replace(tzinfo=timezone.utc)

    def digest_due(self, now: datetime | None = None) -> bool:
        """True when the weekly digest is on and a week has passed since the last one."""
        if not self.weekly_digest:
            return False
        last = self.last_digest
        now = now or datetime.now(timezone.utc)
        return last is None or now - last >= DIGEST_INTERVAL

    def record_digest(self, now: datetime | None = None) -> None:
        now = now or datetime.now(timezone.utc)
        self._save_setting("last_digest", now.isoformat())

    def _save_setting(self, name: str, value: Any) -> None:
        self._settings = {**self._settings, name: value}
        self.store.save(SETTINGS_KEY, self._settings)
