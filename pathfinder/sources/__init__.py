from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable

from .adzuna import AdzunaSource
from .base import BlockingPostingSource, PostingSource
from .demo import DemoSource
from .remotive import RemotiveSource

from pathfinder.log import get_logger

log = get_logger(__name__)

__all__ = [
    "PostingSource", "BlockingPostingSource", "DemoSource", "RemotiveSource",
    "AdzunaSource", "SourceConfig", "Registry", "set_enabled", "enabled_names",
    "get_sources",
]


@dataclass(frozen=True)
class SourceConfig:
    name: str
    source: PostingSource
    enabled: bool = True


Registry = tuple[SourceConfig, ...]


def set_enabled(registry: Iterable[SourceConfig], name: str, enabled: bool) -> Registry:
    """Return a copy of *registry* with the named source switched on or off."""
    updated = tuple(replace(c, enabled=enabled) if c.name == name else c for c in registry)
    if all(c.name != name for c in updated):
        raise KeyError(f"Unknown source: {name}")
    return updated


def enabled_names(registry: Iterable[SourceConfig]) -> list[str]:
    return [c.name for c in registry if c.enabled]


def get_sources(env_getter: Callable[[str], str]) -> Registry:
    configs: list[SourceConfig] = [SourceConfig(DemoSource.name, DemoSource(), enabled=True)]
    log.info("Registered source: DEMO (sample postings)")

    configs.append(SourceConfig(RemotiveSource.name, RemotiveSource(), enabled=False))
    log.info("Registered source: Remotive (free, remote jobs, off by default)")

    if env_getter("ADZUNA_APP_ID") and env_getter("ADZUNA_APP_KEY"):
        source = AdzunaSource(
            env_getter("ADZUNA_APP_ID"),
            env_getter("ADZUNA_APP_KEY"),
            country=env_getter("ADZUNA_COUNTRY") or "au",
        )
        configs.append(SourceConfig(AdzunaSource.name, source, enabled=True))
        log.info("Registered source: Adzuna")

    return tuple(configs)
