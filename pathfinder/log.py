"""
Logging for Pathfinder.

Modules ask for a logger with ``get_logger(__name__)`` and never touch
handlers themselves. The entry points (``run_pathfinder.py`` and ``app.py``)
call ``setup_logging`` once with the level and directory from
``pathfinder.config``; until then records propagate to whatever the host
process has configured.
"""
from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path

PACKAGE = "pathfinder"
LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that drown the adapters' own messages at DEBUG.
NOISY_LOGGERS = ("urllib3", "watchdog", "asyncio")

_installed: list[logging.Handler] = []


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def resolve_level(level: int | str) -> int:
    """Accept ``logging.INFO`` or a name such as ``"debug"``."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def log_file_for(log_dir: Path, day: date | None = None) -> Path:
    day = day or date.today()
    return Path(log_dir) / f"pathfinder_{day:%Y-%m-%d}.log"


def setup_logging(
    level: int | str = logging.INFO,
    log_dir: Path | None = None,
    *,
    console: bool = True,
) -> logging.Logger:
    """Attach console and daily-file handlers to the ``pathfinder`` logger.

    Calling it again replaces the handlers from the previous call, so a
    Streamlit rerun does not duplicate every line. The file handler always
    records DEBUG; an unwritable *log_dir* only costs the file output.
    """
    logger = logging.getLogger(PACKAGE)
    reset_logging()
    logger.setLevel(logging.DEBUG)
    try:
        threshold = resolve_level(level)
    except ValueError:
        threshold = logging.INFO
        logger.warning("Unknown log level %r; using INFO", level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    if console:
        stream = logging.StreamHandler(sys.stderr)
        stream.setLevel(threshold)
        stream.setFormatter(formatter)
        _install(logger, stream)

    if log_dir is not None:
        try:
            Path(log_dir).mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file_for(log_dir), encoding="utf-8")
        except OSError as exc:
            logger.warning("File logging disabled (%s)", exc)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(formatter)
            _install(logger, file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(threshold, logging.WARNING))
    return logger


def reset_logging() -> None:
    """Detach and close the handlers installed by ``setup_logging``."""
    logger = logging.getLogger(PACKAGE)
    while _installed:
        handler = _installed.pop()
        logger.removeHandler(handler)
        handler.close()


def _install(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.addHandler(handler)
    _installed.append(handler)
