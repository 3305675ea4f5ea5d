"""Logging setup for hosts of the combat core.

The combat package only ever logs through ``logging.getLogger(__name__)``;
nothing is printed. A host (game client, simulation script, test harness)
calls ``setup_logging()`` once to route those records somewhere.

- Records go to a rotating UTF-8 file, ``logs/monsterhunt.log`` by default.
- The console stays quiet unless ``enable_console`` is set.
- Calling it again reconfigures the existing handlers instead of adding more.

Usage:
    from logging_config import setup_logging
    setup_logging()                         # level from CombatConfig
    setup_logging(level="DEBUG", enable_console=True)

Environment overrides:
    MONSTERHUNT_LOG_LEVEL=DEBUG|INFO|WARNING|ERROR
    MONSTERHUNT_LOG_FILE=path/to/file.log
    MONSTERHUNT_DEBUG=1                     # forces DEBUG on the file handler
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable

from combat.config import CombatConfig

FILE_HANDLER_NAME = "monsterhunt_file"
CONSOLE_HANDLER_NAME = "monsterhunt_console"
DEFAULT_LOG_FILE = Path("logs") / "monsterhunt.log"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _parse_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or "").strip().upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def _resolve_log_path(log_file: str | None) -> Path:
    path = Path(os.environ.get("MONSTERHUNT_LOG_FILE") or log_file or DEFAULT_LOG_FILE)
    if not path.is_absolute():
        path = Path.cwd() / path
    return path


def _named_handler(
    root: logging.Logger,
    name: str,
    factory: Callable[[], logging.Handler],
) -> logging.Handler:
    """Return the root handler called ``name``, creating it on first use"""
    for handler in root.handlers:
        if handler.name == name:
            return handler
    handler = factory()
    handler.name = name
    root.addHandler(handler)
    return handler


def setup_logging(
    *,
    level: str | int | None = None,
    log_file: str | None = None,
    enable_file: bool = True,
    enable_console: bool = False,
    console_level: str | int = "WARNING",
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure the root logger for the combat core.

    Args:
        level: file handler level; defaults to ``CombatConfig.log_level``
            (DEBUG when ``debug_mode`` is on). ``MONSTERHUNT_LOG_LEVEL``
            wins over this argument.
        log_file: log path; ``MONSTERHUNT_LOG_FILE`` wins over it
        enable_file: attach the rotating file handler
        enable_console: attach a stderr handler
        console_level: stderr handler level
        max_bytes: rotation size
        backup_count: rotated files kept

    Returns:
        The root logger
    """
    config = CombatConfig.from_env()
    if os.environ.get("MONSTERHUNT_LOG_LEVEL"):
        level = config.log_level
    elif level is None:
        level = "DEBUG" if config.debug_mode else config.log_level

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)  # handlers filter
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    log_path = _resolve_log_path(log_file)
    if enable_file:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = _named_handler(root, FILE_HANDLER_NAME, lambda: RotatingFileHandler(
            str(log_path),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        ))
        file_handler.setFormatter(formatter)
        file_handler.setLevel(_parse_level(level))

    if enable_console:
        console_handler = _named_handler(root, CONSOLE_HANDLER_NAME, logging.StreamHandler)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(_parse_level(console_level))

    logging.getLogger(__name__).info(
        "Combat logging ready | level=%s file=%s console=%s",
        level,
        log_path if enable_file else None,
        enable_console,
    )
    return root
