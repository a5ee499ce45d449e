"""Logging setup shared by the sync pipeline.

Every module logs through ``logging.getLogger(__name__)``; since all of them
live under the ``brawl_sync`` package, a single handler installed on the
``brawl_sync`` logger collects the whole pipeline's output.

    ========  ==============  =====
    Project   Python level    Value
    ========  ==============  =====
    QUIET     WARNING          30
    NORMAL    INFO             20
    VERBOSE   VERBOSE (custom) 15
    DEBUG     DEBUG            10
    ========  ==============  =====

Usage::

    >>> from brawl_sync.utils.logger import configure_logging, get_logger
    >>> configure_logging("VERBOSE")
    >>> log = get_logger("parser")
    >>> log.info("Parsing brawlers...")

The ``BRAWL_SYNC_LOG_LEVEL`` environment variable sets the level when no
explicit level is passed; ``NORMAL`` is the fallback.
"""

from __future__ import annotations

import logging
import os
import sys

VERBOSE: int = 15
"""Custom level between INFO and DEBUG, used for per-entity sync progress."""

logging.addLevelName(VERBOSE, "VERBOSE")

QUIET: int = logging.WARNING
NORMAL: int = logging.INFO
DEBUG: int = logging.DEBUG

_LEVEL_MAP: dict[str, int] = {
    "QUIET": QUIET,
    "NORMAL": NORMAL,
    "VERBOSE": VERBOSE,
    "DEBUG": DEBUG,
}

ROOT_LOGGER_NAME: str = "brawl_sync"
LOG_LEVEL_ENV_VAR: str = "BRAWL_SYNC_LOG_LEVEL"
_LOG_FORMAT: str = "%(asctime)s | %(name)s | %(levelname)-8s | %(message)s"


def resolve_level(level: str | None = None) -> int:
    """Translate a project level name into a numeric logging level.

    Args:
        level: ``"QUIET"``, ``"NORMAL"``, ``"VERBOSE"`` or ``"DEBUG"``
            (case-insensitive). ``None`` falls back to the
            ``BRAWL_SYNC_LOG_LEVEL`` environment variable, then ``"NORMAL"``.

    Raises:
        ValueError: If the resolved name is not a known level.
    """
    resolved = level if level is not None else os.environ.get(LOG_LEVEL_ENV_VAR, "NORMAL")
    try:
        return _LEVEL_MAP[resolved.upper()]
    except KeyError:
        msg = f"Unknown log level {resolved!r}. Valid levels: {', '.join(sorted(_LEVEL_MAP))}"
        raise ValueError(msg) from None


def configure_logging(level: str | None = None) -> None:
    """Install a stderr handler on the ``brawl_sync`` logger.

    Safe to call repeatedly: previously installed handlers are removed first.

    Args:
        level: Project level name, see :func:`resolve_level`.

    Raises:
        ValueError: If the resolved level name is not recognised.
    """
    numeric_level = resolve_level(level)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(numeric_level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)

    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger below the ``brawl_sync`` root (``get_logger("cli")`` -> ``brawl_sync.cli``)."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
