#!/usr/bin/env python3
"""Run one search with the saved profile and log the ranked results."""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from pathfinder.config import DATA_DIR, DEFAULT_LOCATION, DEFAULT_QUERY, LOG_DIR, LOG_LEVEL, ensure_dirs
from pathfinder.dashboard import Dashboard
from pathfinder.digest import build_digest, write_digest
from pathfinder.log import get_logger, setup_logging
from pathfinder.store import JsonStore

log = get_logger("pathfinder.cli")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--query", default=DEFAULT_QUERY)
    parser.add_argument("--location", default=DEFAULT_LOCATION)
    parser.add_argument("--limit", type=int, default=10, help="postings to show")
    parser.add_argument("--digest", action="store_true", help="write a markdown digest now")
    parser.add_argument("--log-level", default=LOG_LEVEL)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.log_level, LOG_DIR)
    ensure_dirs()
    dashboard = Dashboard(JsonStore(DATA_DIR))

    asyncio.run(dashboard.search(args.query, args.location))
    ranked = dashboard.ranked()
    if not ranked:
        log.warning("No postings found for %r in %r", args.query, args.location)
        return 1

    for i, s in enumerate(ranked[: args.limit], 1):
        log.info("%2d. %5.2f  %s @ %s (%s)", i, s.score, s.posting.title, s.posting.company, s.posting.location)

    if args.digest or dashboard.digest_due():
        content = build_digest(ranked, limit=args.limit, feedback=dashboard.feedback_log())
        write_digest(content)
        dashboard.record_digest()
    return 0


if __name__ == "__main__":
    sys.exit(main())
