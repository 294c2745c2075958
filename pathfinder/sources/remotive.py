"""Remotive — free API for remote jobs (no API key required).

Docs: https://remotive.com/api/remote-jobs
"""
from __future__ import annotations

import re

import requests

from pathfinder.log import get_logger
from pathfinder.models import Posting
from pathfinder.retry import retry
from pathfinder.sources.base import BlockingPostingSource
from pathfinder.tags import guess_seniority

log = get_logger(__name__)

API_URL = "https://remotive.com/api/remote-jobs"

WORK_TYPES: dict[str, str] = {
    "full_time": "Full-time",
    "part_time": "Part-time",
    "contract": "Contract",
    "freelance": "Contract",
    "internship": "Fixed-term",
}


def split_query(query: str, max_terms: int = 3) -> list[str]:
    """Break an ``a OR b OR c`` query into the individual search terms."""
    terms = [t.strip() for t in re.split(r"\s+OR\s+", query or "") if t.strip()]
    return terms[:max_terms]


def parse_hit(hit: dict, source: str = "REMOTIVE") -> Posting:
    return Posting(
        id=str(hit.get("id", "")),
        title=hit.get("title", ""),
        company=hit.get("company_name", ""),
        location=hit.get("candidate_required_location") or "Remote",
        url=hit.get("url", ""),
        posted_at=hit.get("publication_date"),
        description=hit.get("description", ""),
        source=source,
        tags=[t.lower() for t in hit.get("tags") or []],
        work_type=WORK_TYPES.get(hit.get("job_type", "")),
        seniority=guess_seniority(hit.get("title", "")),
        remote=True,
        raw=hit,
    )


class RemotiveSource(BlockingPostingSource):
    name = "REMOTIVE"

    def __init__(self, limit: int = 20) -> None:
        self.limit = limit

    @retry(max_attempts=2, base_delay=1.5, retryable=(requests.RequestException, OSError))
    def _fetch(self, search: str) -> list[Posting]:
        params: dict = {"limit": self.limit}
        if search:
            params["search"] = search

        r = requests.get(API_URL, params=params, timeout=15)
        r.raise_for_status()
        data = r.json()
        return [parse_hit(hit, self.name) for hit in data.get("jobs", [])]

    def search(self, query: str, location: str) -> list[Posting]:
        # Remote-only board: location is not a search dimension here.
        postings: list[Posting] = []
        seen: set[str] = set()
        for term in split_query(query) or [""]:
            batch = self._fetch(term)
            for p in batch:
                if p.id not in seen:
                    seen.add(p.id)
                    postings.append(p)
            log.debug("Remotive search=%r returned %d postings", term, len(batch))
        return postings[: self.limit]
