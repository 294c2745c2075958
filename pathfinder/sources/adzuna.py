"""Adzuna job search — aggregator with Australian coverage.

Free tier: 250 requests/day.  Sign up at https://developer.adzuna.com/
"""
from __future__ import annotations

import requests

from pathfinder.log import get_logger
from pathfinder.models import Posting
from pathfinder.retry import retry
from pathfinder.sources.base import BlockingPostingSource
from pathfinder.sources.remotive import split_query
from pathfinder.tags import guess_arrangement, guess_seniority

log = get_logger(__name__)

BASE_URL = "https://api.adzuna.com/v1/api/jobs/{country}/search/1"

CONTRACT_TIMES: dict[str, str] = {"full_time": "Full-time", "part_time": "Part-time"}
CONTRACT_TYPES: dict[str, str] = {"contract": "Contract"}


def parse_hit(hit: dict, source: str = "ADZUNA") -> Posting:
    title = hit.get("title", "")
    location = (hit.get("location") or {}).get("display_name", "")
    description = hit.get("description", "")
    remote, hybrid = guess_arrangement(location, title, description)
    work_type = CONTRACT_TYPES.get(hit.get("contract_type", "")) or CONTRACT_TIMES.get(
        hit.get("contract_time", "")
    )
    return Posting(
        id=str(hit.get("id", "")),
        title=title,
        company=(hit.get("company") or {}).get("display_name", ""),
        location=location,
        url=hit.get("redirect_url", ""),
        posted_at=hit.get("created"),
        description=description,
        source=source,
        salary_min=hit.get("salary_min"),
        salary_max=hit.get("salary_max"),
        work_type=work_type,
        seniority=guess_seniority(title),
        remote=remote,
        hybrid=hybrid,
        raw=hit,
    )


class AdzunaSource(BlockingPostingSource):
    name = "ADZUNA"

    def __init__(self, app_id: str, app_key: str, country: str = "au", per_page: int = 20) -> None:
        self.app_id = app_id
        self.app_key = app_key
        self.country = country
        self.per_page = per_page

    @retry(max_attempts=3, base_delay=2.0, retryable=(requests.RequestException, OSError))
    def _fetch(self, what: str, where: str) -> list[Posting]:
        params: dict = {
            "app_id": self.app_id,
            "app_key": self.app_key,
            "what": what,
            "results_per_page": self.per_page,
            "content-type": "application/json",
        }
        if where:
            params["where"] = where

        r = requests.get(BASE_URL.format(country=self.country), params=params, timeout=15)
        r.raise_for_status()
        data = r.json()
        return [parse_hit(hit, self.name) for hit in data.get("results", [])]

    def search(self, query: str, location: str) -> list[Posting]:
        postings: list[Posting] = []
        seen: set[str] = set()
        wheres = split_query(location, max_terms=2) or [""]
        for what in split_query(query) or [query]:
            for where in wheres:
                batch = self._fetch(what, "" if where.lower() == "remote" else where)
                for p in batch:
                    if p.id not in seen:
                        seen.add(p.id)
                        postings.append(p)
                log.debug("Adzuna what=%r where=%r returned %d postings", what, where, len(batch))
        return postings
