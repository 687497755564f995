"""
Logging configuration — one setup call per process.

Every module logs through ``logging.getLogger(__name__)``; main.py calls
``setup_logging`` once before any command runs.

Console level, highest precedence first:

    --debug / -v / -q  >  RECIPEBUMP_LOG_LEVEL  >  WARNING

At WARNING the console shows ``LEVEL: message`` lines only, which is what
a scheduled bump job wants in its log.  An optional file log
(RECIPEBUMP_LOG_FILE, level RECIPEBUMP_LOG_FILE_LEVEL) always gets the
full diagnostic format.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "RECIPEBUMP_LOG_LEVEL"
LOG_FILE_ENV = "RECIPEBUMP_LOG_FILE"
LOG_FILE_LEVEL_ENV = "RECIPEBUMP_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

# (format, datefmt) per console level; levels in between use the next one up
_CONSOLE_FORMATS = (
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(levelname)s: %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
)
_FILE_FORMAT = (_DETAILED, "%Y-%m-%d %H:%M:%S")


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level name from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name.
        log_file: Optional path of a log file to append to.
        log_file_level: Level for the file; defaults to ``level``.
    """
    console_level = _parse_level(level)
    fmt, datefmt = next(
        (f, d) for threshold, f, d in _CONSOLE_FORMATS if console_level <= threshold
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(*_FILE_FORMAT))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    # A closed stderr (e.g. a finished CliRunner) must not break later logging
    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    return numeric if isinstance(numeric, int) else logging.WARNING
