"""Paths, environment and the built-in preference profile."""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from pathfinder.log import get_logger

log = get_logger(__name__)

load_dotenv()

PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = PROJECT_ROOT / "config"
PREFERENCES_PATH: Path = CONFIG_DIR / "preferences.yaml"
DATA_DIR: Path = Path(os.environ.get("PATHFINDER_DATA_DIR", PROJECT_ROOT / "data"))
REPORTS_DIR: Path = PROJECT_ROOT / "reports"
LOG_DIR: Path = Path(os.environ.get("PATHFINDER_LOG_DIR", PROJECT_ROOT / "logs"))
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

DEFAULT_QUERY = "organisational psychology OR people analytics OR behavioural insights"
DEFAULT_LOCATION = "Sydney OR Remote"

DEFAULT_WEIGHTS: dict[str, float] = {
    "keywordMatch": 1.4,
    "negativeKeyword": -2.2,
    "locationMatch": 0.9,
    "salary": 1.2,
    "workType": 0.6,
    "industry": 0.7,
    "seniority": 0.8,
    "remote": 0.5,
    "recency": 0.6,
}

DEFAULT_PREFERENCES: dict[str, Any] = {
    "keywords": [
        "organisational psychology",
        "behavioural science",
        "OD",
        "leadership development",
        "culture",
        "statistics",
        "program evaluation",
        "research methods",
        "data analysis",
    ],
    "blocked_keywords": ["corruption prevention"],
    "preferred_locations": ["Sydney", "NSW", "Hybrid", "Remote"],
    "excluded_locations": [],
    "min_salary": 140000,
    "work_types": ["Full-time", "Fixed-term", "Contract"],
    "industries": [
        "Consulting", "Tech", "Healthcare", "Higher Education",
        "Financial Services", "Public Sector",
    ],
    "seniority": ["Senior", "Lead", "Manager", "Director"],
    "remote_only": False,
    "academia": True,
    "consulting": True,
    "public_sector": True,
    "private_sector": True,
    "weights": DEFAULT_WEIGHTS,
}


def load_default_preferences(path: Path | None = None) -> dict[str, Any]:
    """Built-in profile, with config/preferences.yaml (if any) layered on top."""
    data = copy.deepcopy(DEFAULT_PREFERENCES)
    path = path or PREFERENCES_PATH
    if not path.exists():
        return data

    try:
        with open(path, "r", encoding="utf-8") as f:
            override = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        log.warning("Ignoring unreadable %s: %s", path.name, exc)
        return data

    if not isinstance(override, dict):
        log.warning("Ignoring %s: expected a mapping at top level", path.name)
        return data

    weights = override.pop("weights", None) or {}
    data.update({k: v for k, v in override.items() if k in data})
    if not isinstance(weights, dict):
        log.warning("Ignoring weights in %s: expected a mapping", path.name)
        weights = {}
    data["weights"].update({k: v for k, v in weights.items() if k in DEFAULT_WEIGHTS})
    log.debug("Loaded preference overrides from %s", path)
    return data


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def ensure_dirs() -> None:
    for d in (DATA_DIR, REPORTS_DIR):
        d.mkdir(parents=True, exist_ok=True)
