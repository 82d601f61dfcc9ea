from __future__ import annotations

import logging

from rich.console import Console
from rich.text import Text

NOTICE = 25
logging.addLevelName(NOTICE, "NOTICE")

ROOT_LOGGER = "relnotes"

_BADGES: dict[int, tuple[str, str]] = {
    logging.DEBUG: (" DEBUG ", "white on blue"),
    logging.INFO: (" INFO ", "black on green"),
    NOTICE: (" NOTICE ", "black on cyan"),
    logging.WARNING: (" WARN ", "black on yellow"),
    logging.ERROR: (" ERROR ", "white on red"),
    logging.CRITICAL: (" CRITICAL ", "white on magenta"),
}

_LEVEL_NAMES: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "notice": NOTICE,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "crit": logging.CRITICAL,
    "critical": logging.CRITICAL,
}


def parse_level(name: str) -> int:
    try:
        return _LEVEL_NAMES[name.strip().lower()]
    except KeyError:
        allowed = ", ".join(_LEVEL_NAMES)
        raise ValueError(f"unknown log level {name!r} (choose from {allowed})") from None


def notice(logger: logging.Logger, msg: str, *args: object) -> None:
    logger.log(NOTICE, msg, *args)


def _badge_for(levelno: int) -> tuple[str, str]:
    # Custom levels fall back to the closest standard badge below them.
    for level in sorted(_BADGES, reverse=True):
        if levelno >= level:
            return _BADGES[level]
    return _BADGES[logging.DEBUG]


class BadgeHandler(logging.Handler):
    """Print records as ``<badge> <message>`` lines through a rich console."""

    def __init__(self, console: Console | None = None, *, color: bool = True) -> None:
        super().__init__()
        self.console = console or Console(stderr=True, highlight=False)
        self.color = color

    def emit(self, record: logging.LogRecord) -> None:
        try:
            label, style = _badge_for(record.levelno)
            line = Text()
            line.append(label, style=style if self.color else None)
            line.append(" ")
            line.append(self.format(record))
            self.console.print(line, soft_wrap=True)
        except Exception:
            self.handleError(record)


def configure_logging(
    level: int | str = logging.WARNING,
    *,
    color: bool = True,
    console: Console | None = None,
) -> logging.Logger:
    """Route ``relnotes`` log records through a single :class:`BadgeHandler`."""

    threshold = parse_level(level) if isinstance(level, str) else level
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, BadgeHandler):
            logger.removeHandler(handler)
    logger.addHandler(BadgeHandler(console, color=color))
    logger.setLevel(threshold)
    return logger


__all__ = [
    "BadgeHandler",
    "NOTICE",
    "configure_logging",
    "notice",
    "parse_level",
]
