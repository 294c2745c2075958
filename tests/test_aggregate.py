from __future__ import annotations

import asyncio

from conftest import FailingSource, StaticSource, make_posting
from pathfinder.aggregate import SearchSession, dedupe_postings, fetch_postings
from pathfinder.models import Posting
from pathfinder.sources import PostingSource, SourceConfig, set_enabled


def _registry(*sources: PostingSource, disabled: tuple[str, ...] = ()) -> tuple[SourceConfig, ...]:
    return tuple(SourceConfig(s.name, s, enabled=s.name not in disabled) for s in sources)


def test_partial_adapter_failure_returns_successful_postings():
    good = StaticSource("GOOD", [make_posting(str(i), source="GOOD") for i in range(3)])
    registry = _registry(FailingSource("BAD"), good)

    postings = asyncio.run(fetch_postings("q", "l", registry))

    assert [p.id for p in postings] == ["0", "1", "2"]


def test_all_adapters_failing_yields_empty_list():
    registry = _registry(FailingSource("A"), FailingSource("B", ValueError("bad payload")))
    assert asyncio.run(fetch_postings("q", "l", registry)) == []


def test_duplicate_keys_keep_the_later_posting():
    first = StaticSource("A", [make_posting("1", source="SEEK", title="Old"), make_posting("2", source="SEEK")])
    second = StaticSource("B", [make_posting("1", source="SEEK", title="New")])

    postings = asyncio.run(fetch_postings("q", "l", _registry(first, second)))

    assert len(postings) == 2
    assert postings[0].title == "New"
    assert postings[0].key == ("SEEK", "1")


def test_same_id_from_different_sources_is_kept():
    postings = dedupe_postings([make_posting("1", source="A"), make_posting("1", source="B")])
    assert [p.source for p in postings] == ["A", "B"]


def test_disabled_adapters_are_not_called():
    on = StaticSource("ON", [make_posting("1", source="ON")])
    off = StaticSource("OFF", [make_posting("2", source="OFF")])

    postings = asyncio.run(fetch_postings("psych", "Sydney", _registry(on, off, disabled=("OFF",))))

    assert [p.id for p in postings] == ["1"]
    assert on.calls == [("psych", "Sydney")]
    assert off.calls == []


def test_no_enabled_adapters():
    registry = set_enabled(_registry(StaticSource("ONLY", [make_posting()])), "ONLY", False)
    assert asyncio.run(fetch_postings("q", "l", registry)) == []


class _Handshake(PostingSource):
    """Completes only if its peer is running at the same time."""

    def __init__(self, name: str, mine: asyncio.Event, theirs: asyncio.Event) -> None:
        self.name = name
        self.mine = mine
        self.theirs = theirs

    async def fetch(self, query: str, location: str) -> list[Posting]:
        self.mine.set()
        await asyncio.wait_for(self.theirs.wait(), timeout=1)
        return [make_posting(self.name, source=self.name)]


def test_adapters_run_concurrently():
    async def scenario():
        a, b = asyncio.Event(), asyncio.Event()
        registry = _registry(_Handshake("A", a, b), _Handshake("B", b, a))
        return await fetch_postings("q", "l", registry)

    assert [p.source for p in asyncio.run(scenario())] == ["A", "B"]


class _Gated(PostingSource):
    def __init__(self, name: str, gate: asyncio.Event, postings: list[Posting]) -> None:
        self.name = name
        self.gate = gate
        self.postings = postings

    async def fetch(self, query: str, location: str) -> list[Posting]:
        await self.gate.wait()
        return self.postings


def test_superseded_search_is_discarded():
    async def scenario():
        session = SearchSession()
        gate = asyncio.Event()
        slow = _registry(_Gated("SLOW", gate, [make_posting("old", source="SLOW")]))
        fast = _registry(StaticSource("FAST", [make_posting("new", source="FAST")]))

        first = asyncio.create_task(session.run("q", "l", slow))
        await asyncio.sleep(0)
        second = await session.run("q", "l", fast)
        gate.set()
        stale = await first
        return session, stale, second

    session, stale, second = asyncio.run(scenario())

    assert stale is None
    assert [p.id for p in second] == ["new"]
    assert [p.id for p in session.postings] == ["new"]
    assert session.generation == 2
