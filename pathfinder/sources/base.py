from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

from pathfinder.models import Posting


class PostingSource(ABC):
    """Fetches postings from one origin. Failure is signalled by raising."""

    name: str = "unknown"

    @abstractmethod
    async def fetch(self, query: str, location: str) -> list[Posting]:
        pass


class BlockingPostingSource(PostingSource):
    """Adapter built on a blocking HTTP client; ``search`` runs in a worker thread."""

    async def fetch(self, query: str, location: str) -> list[Posting]:
        return await asyncio.to_thread(self.search, query, location)

    @abstractmethod
    def search(self, query: str, location: str) -> list[Posting]:
        pass
