"""Logging setup for loadstate processes."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TextIO

from .config import ConfigError, LoggingConfig

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAIN_LOG_NAME = "loadstate.log"
DEBUG_LOG_NAME = "debug.log"
LOG_MAX_BYTES = 5_000_000
LOG_BACKUPS = 5

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# level -> (symbol, ANSI colour)
_CONSOLE_STYLE: dict[int, tuple[str, str]] = {
    logging.DEBUG: ("D", "36"),
    logging.INFO: ("I", "32"),
    logging.WARNING: ("!", "33"),
    logging.ERROR: ("X", "31"),
    logging.CRITICAL: ("X", "35"),
}


class ConsoleFormatter(logging.Formatter):
    """Render ``<symbol> <message>``, colouring the symbol when asked to."""

    def __init__(self, use_color: bool) -> None:
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        symbol, colour = _CONSOLE_STYLE.get(record.levelno, ("?", "37"))
        if self.use_color:
            symbol = f"\x1b[{colour}m{symbol}\x1b[0m"
        return f"{symbol} {super().format(record)}"

    @classmethod
    def for_stream(cls, stream: TextIO) -> ConsoleFormatter:
        isatty = getattr(stream, "isatty", None)
        return cls(use_color=bool(isatty and isatty()))


def configure_logging(
    logging_config: LoggingConfig,
    root_dir: Path,
    *,
    verbose: bool = False,
) -> None:
    """Install file and console handlers on the root logger.

    ``verbose`` forces DEBUG regardless of the configured level.
    """

    level = logging.DEBUG if verbose else level_from_string(logging_config.level)
    log_dir = (root_dir / "logs").expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)

    file_formatter = logging.Formatter(FILE_FORMAT)
    targets: list[tuple[logging.Handler, int, logging.Formatter]] = [
        (_rotating(log_dir / MAIN_LOG_NAME), logging.INFO, file_formatter),
        (logging.StreamHandler(sys.stderr), logging.DEBUG, ConsoleFormatter.for_stream(sys.stderr)),
    ]
    if logging_config.debug_file:
        targets.append((_rotating(log_dir / DEBUG_LOG_NAME), logging.DEBUG, file_formatter))

    handlers: list[logging.Handler] = []
    for handler, handler_level, formatter in targets:
        handler.setLevel(handler_level)
        handler.setFormatter(formatter)
        handlers.append(handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)


def level_from_string(level: str) -> int:
    try:
        return _LEVELS[level.strip().upper()]
    except KeyError as exc:
        raise ConfigError(f"Unknown log level: {level}") from exc


def _rotating(path: Path) -> RotatingFileHandler:
    return RotatingFileHandler(path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")


__all__ = ["ConsoleFormatter", "configure_logging", "level_from_string"]
