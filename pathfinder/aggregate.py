"""Concurrent fetching across source adapters with per-adapter failure isolation."""
from __future__ import annotations

import asyncio
from typing import Iterable

from pathfinder.log import get_logger
from pathfinder.models import Posting
from pathfinder.sources import SourceConfig

log = get_logger(__name__)


def dedupe_postings(postings: Iterable[Posting]) -> list[Posting]:
    """Collapse postings sharing ``(source, id)``; the last one wins.

    Output keeps the position where each key was first seen.
    """
    by_key: dict[tuple[str, str], Posting] = {}
    for posting in postings:
        by_key[posting.key] = posting
    return list(by_key.values())


async def fetch_postings(query: str, location: str, registry: Iterable[SourceConfig]) -> list[Posting]:
    """Query every enabled adapter at once and merge whatever succeeded."""
    configs = [c for c in registry if c.enabled]
    if not configs:
        log.warning("No sources enabled")
        return []

    log.info("Searching %d source(s) concurrently...", len(configs))
    results = await asyncio.gather(
        *(c.source.fetch(query, location) for c in configs),
        return_exceptions=True,
    )

    postings: list[Posting] = []
    for config, result in zip(configs, results):
        if isinstance(result, BaseException):
            log.warning("Adapter failed: %s (%s)", config.name, result)
            continue
        log.info("[%s] returned %d postings", config.name, len(result))
        postings.extend(result)

    unique = dedupe_postings(postings)
    log.info("Total unique postings: %d", len(unique))
    return unique


class SearchSession:
    """Tracks the latest search so a slow, superseded one cannot overwrite it."""

    def __init__(self) -> None:
        self._generation = 0
        self.postings: list[Posting] = []

    @property
    def generation(self) -> int:
        return self._generation

    async def run(self, query: str, location: str, registry: Iterable[SourceConfig]) -> list[Posting] | None:
        self._generation += 1
        ticket = self._generation
        results = await fetch_postings(query, location, registry)
        if ticket != self._generation:
            log.info("Discarding results of superseded search #%d", ticket)
            return None
        self.postings = results
        return results
