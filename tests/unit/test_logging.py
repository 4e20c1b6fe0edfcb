from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from loadstate.config import ConfigError, LoggingConfig
from loadstate.logging import (
    DEBUG_LOG_NAME,
    MAIN_LOG_NAME,
    ConsoleFormatter,
    configure_logging,
    level_from_string,
)


@pytest.mark.usefixtures("restore_root_logger")
def test_configure_logging_creates_log_files(tmp_path: Path) -> None:
    configure_logging(LoggingConfig(level="debug", debug_file=True), tmp_path)

    logging.getLogger("loadstate.test").info("hello")

    log_dir = tmp_path / "logs"
    assert logging.getLogger().level == logging.DEBUG
    assert "hello" in (log_dir / MAIN_LOG_NAME).read_text(encoding="utf-8")
    assert (log_dir / DEBUG_LOG_NAME).exists()


@pytest.mark.usefixtures("restore_root_logger")
def test_verbose_overrides_configured_level(tmp_path: Path) -> None:
    configure_logging(LoggingConfig(level="error"), tmp_path, verbose=True)

    assert logging.getLogger().level == logging.DEBUG
    assert not (tmp_path / "logs" / DEBUG_LOG_NAME).exists()


def test_level_from_string() -> None:
    assert level_from_string(" warn ") == logging.WARNING
    with pytest.raises(ConfigError, match="Unknown log level"):
        level_from_string("chatty")


def test_console_formatter_symbols() -> None:
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)

    assert ConsoleFormatter(use_color=False).format(record) == "! careful"
    assert ConsoleFormatter(use_color=True).format(record).endswith("\x1b[0m careful")


def test_console_formatter_colours_only_terminals() -> None:
    class _Terminal(io.StringIO):
        def isatty(self) -> bool:
            return True

    assert ConsoleFormatter.for_stream(io.StringIO()).use_color is False
    assert ConsoleFormatter.for_stream(_Terminal()).use_color is True
