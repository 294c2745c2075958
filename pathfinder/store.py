"""Best-effort JSON key-value persistence with advisory file locking."""
from __future__ import annotations

import copy
import fcntl
import json
import os
from pathlib import Path
from typing import Any

from pathfinder.log import get_logger

log = get_logger(__name__)

PREFERENCES_KEY = "preferences"
FEEDBACK_LOG_KEY = "feedback-log"
SAVED_POSTINGS_KEY = "saved-postings"
SETTINGS_KEY = "settings"


def _lock(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        op = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(f.fileno(), op)
    except (OSError, AttributeError):
        pass


def _unlock(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class JsonStore:
    """One ``<key>.json`` file per key under *root*."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def path(self, key: str) -> Path:
        if not key or "/" in key or key.startswith("."):
            raise ValueError(f"Invalid store key: {key!r}")
        return self.root / f"{key}.json"

    def save(self, key: str, value: Any) -> None:
        path = self.path(key)
        self.root.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                _lock(f)
                try:
                    json.dump(value, f, indent=2, ensure_ascii=False)
                    f.flush()
                finally:
                    _unlock(f)
            os.replace(tmp, path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
        log.debug("Saved %s → %s", key, path.name)

    def load(self, key: str, fallback: Any) -> Any:
        """Stored value for *key*, or a copy of *fallback* if absent or unreadable.

        A stored mapping is layered over a mapping fallback so fields added
        since the value was written still get their defaults.
        """
        path = self.path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                _lock(f, exclusive=False)
                try:
                    value = json.load(f)
                finally:
                    _unlock(f)
        except FileNotFoundError:
            return copy.deepcopy(fallback)
        except (OSError, ValueError) as exc:
            log.debug("Falling back for %s: %s", key, exc)
            return copy.deepcopy(fallback)

        if isinstance(fallback, dict):
            if not isinstance(value, dict):
                log.debug("Falling back for %s: stored value is not a mapping", key)
                return copy.deepcopy(fallback)
            return {**copy.deepcopy(fallback), **value}
        if isinstance(fallback, list) and not isinstance(value, list):
            log.debug("Falling back for %s: stored value is not a list", key)
            return copy.deepcopy(fallback)
        return value

    def append(self, key: str, item: Any) -> list[Any]:
        items = self.load(key, [])
        items.append(item)
        self.save(key, items)
        return items

    def delete(self, key: str) -> bool:
        path = self.path(key)
        if not path.exists():
            return False
        path.unlink()
        log.debug("Deleted %s", key)
        return True
