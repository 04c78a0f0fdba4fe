"""
Logging configuration — one setup call for the CLI entrypoint.

Every module logs through ``logging.getLogger(__name__)`` and inherits
whatever ``setup_logging`` installs on the root logger.

Level precedence:
    CLI flag  >  NPM_OPERATE_LOG_LEVEL  >  WARNING

A log file can be added with NPM_OPERATE_LOG_FILE, at its own level
via NPM_OPERATE_LOG_FILE_LEVEL. The file always gets file:line detail.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "NPM_OPERATE_LOG_LEVEL"
ENV_FILE = "NPM_OPERATE_LOG_FILE"
ENV_FILE_LEVEL = "NPM_OPERATE_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

# Console format by threshold: the most verbose entry the level reaches wins
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(message)s", None),
)


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, then the environment."""
    for flag, name in ((debug, "DEBUG"), (verbose, "INFO"), (quiet, "ERROR")):
        if flag:
            return name
    return os.environ.get(ENV_LEVEL) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with a console (and file) handler.

    Safe to call repeatedly; handlers never accumulate.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to an additional log file.
        log_file_level: Level for the file handler; defaults to ``level``.
    """
    console_level = level_number(level)
    fmt, datefmt = next(
        (f, d) for threshold, f, d in _CONSOLE_FORMATS if console_level <= threshold
    )
    handlers = [_handler(logging.StreamHandler(sys.stderr), console_level, fmt, datefmt)]

    if log_file:
        file_level = level_number(log_file_level) if log_file_level else console_level
        handlers.append(
            _handler(
                logging.FileHandler(log_file, encoding="utf-8"),
                file_level,
                _DETAILED,
                "%Y-%m-%d %H:%M:%S",
            )
        )

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
    for handler in handlers:
        root.addHandler(handler)

    # The root gate must pass whatever the chattiest handler accepts
    root.setLevel(min(h.level for h in handlers))
    logging.raiseExceptions = False


def level_number(name: str | None) -> int:
    """Numeric level for a name such as ``"info"``; WARNING if unknown."""
    if not name:
        return logging.WARNING
    return logging.getLevelNamesMapping().get(name.upper(), logging.WARNING)


def _handler(handler: logging.Handler, level: int, fmt: str, datefmt: str | None) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler
