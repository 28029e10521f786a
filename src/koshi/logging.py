"""Logging for koshi, built on loguru.

koshi is interactive, so console log lines go to stderr and stay short to
avoid burying prompts. Records carry context in `extra`:
- name: module that logged (see get_logger)
- change: jj change id (see bind_change)
- branch, pr: pull request being synced (see bind_pr)

httpx, which githubkit uses for requests, logs through the standard library;
those records are routed into loguru and only shown when debugging.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from loguru import logger

if TYPE_CHECKING:
    from loguru import Logger, Record

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_CONSOLE_FORMAT = "<level>{level: <8}</level> {extra[context]}<level>{message}</level>"
_FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{extra[name]}:{function}:{line} | {extra[context]}{message}"
)

_handler_ids: list[int] = []


class InterceptHandler(logging.Handler):
    """Forward standard library records to loguru under the stdlib logger's name."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(name=record.name).opt(exception=record.exc_info).log(
            level, record.getMessage()
        )


def _effective_level(level: LogLevel, verbose: bool, quiet: bool) -> LogLevel:
    if verbose:
        return "DEBUG"
    if quiet:
        return "WARNING"
    return level


def _add_context(record: Record) -> None:
    """Render bound change/PR context as a short prefix."""
    extra = record["extra"]
    extra.setdefault("name", record["name"])
    parts = []
    if "change" in extra:
        parts.append(str(extra["change"])[:8])
    if "pr" in extra:
        parts.append(f"{extra.get('branch', '')}#{extra['pr']}")
    extra["context"] = f"[{' '.join(parts)}] " if parts else ""


def setup_logging(
    level: LogLevel = "INFO",
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    serialize: bool = False,
) -> Logger:
    """Configure console and optional file logging.

    Args:
        level: Base log level from settings
        verbose: Log at DEBUG, with tracebacks (wins over quiet)
        quiet: Log at WARNING
        log_file: Also log everything at DEBUG to this file, with rotation
        rotation: When to rotate the log file (e.g. "10 MB", "1 day")
        retention: How long to keep rotated files
        serialize: Write the log file as JSON lines

    Returns:
        The configured loguru logger
    """
    reset_logging()
    console_level = _effective_level(level, verbose, quiet)
    logger.configure(patcher=_add_context)

    _handler_ids.append(
        logger.add(
            sys.stderr,
            level=console_level,
            format=_CONSOLE_FORMAT,
            colorize=True,
            backtrace=verbose,
            diagnose=verbose,
        )
    )
    if log_file:
        _handler_ids.append(
            logger.add(
                log_file,
                level="DEBUG",
                format=_FILE_FORMAT,
                rotation=rotation,
                retention=retention,
                compression="gz",
                serialize=serialize,
            )
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    httpx_level = logging.DEBUG if console_level in ("TRACE", "DEBUG") else logging.WARNING
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(httpx_level)

    return logger


def get_logger(name: str) -> Logger:
    """Logger with the module name bound.

    Usage:
        logger = get_logger(__name__)
    """
    return logger.bind(name=name)


def bind_change(change_id: str) -> Logger:
    """Logger carrying the jj change being worked on."""
    return logger.bind(name="koshi.sync", change=change_id)


def bind_pr(branch: str, pr_number: int) -> Logger:
    """Logger carrying the pull request being synced and its head bookmark."""
    return logger.bind(name="koshi.sync", branch=branch, pr=pr_number)


def is_configured() -> bool:
    return bool(_handler_ids)


def reset_logging() -> None:
    """Remove every handler koshi added (used between tests)."""
    logger.remove()
    _handler_ids.clear()
