"""
Console logging for cascadewind.

Every module logs through ``logging.getLogger(__name__)``; this module only
installs a human-readable handler on the ``cascadewind`` logger. Colours
are disabled when ``NO_COLOR`` is set or stderr is not a terminal.
"""

from __future__ import annotations

import logging
import os
import sys

ROOT_LOGGER = "cascadewind"


def _color_enabled() -> bool:
    return not os.environ.get("NO_COLOR") and sys.stderr.isatty()


class Colors:
    """ANSI colour codes for terminal output."""

    RESET = "\033[0m"
    DIM = "\033[2m"
    DEBUG = "\033[36m"  # Cyan
    INFO = "\033[34m"  # Blue
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"  # Red
    CRITICAL = "\033[35m"  # Magenta


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter: ``[module] LEVEL: message``."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DEBUG,
        logging.INFO: Colors.INFO,
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.ERROR,
        logging.CRITICAL: Colors.CRITICAL,
    }

    def __init__(self, use_color: bool | None = None):
        super().__init__()
        self.use_color = _color_enabled() if use_color is None else use_color

    def format(self, record: logging.LogRecord) -> str:
        component = record.name.rsplit(".", 1)[-1]
        message = record.getMessage()

        if not self.use_color:
            prefix = f"[{component}]"
            if record.levelno != logging.INFO:
                prefix = f"{prefix} {record.levelname}:"
            return f"{prefix} {message}"

        level_color = self.LEVEL_COLORS.get(record.levelno, "")
        prefix = f"{Colors.DIM}[{component}]{Colors.RESET}"
        if record.levelno != logging.INFO:
            prefix = f"{prefix} {level_color}{record.levelname}{Colors.RESET}:"
        return f"{prefix} {message}"


def setup_logging(verbose: bool = False, silent: bool = False) -> logging.Logger:
    """
    Configure the ``cascadewind`` logger for console output.

    Args:
        verbose: Emit DEBUG diagnostics (skipped selectors, conflicts)
        silent: Only emit errors; wins over ``verbose``

    Returns:
        The configured package logger
    """
    if silent:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ConsoleFormatter())
    handler.setLevel(level)
    root_logger.addHandler(handler)

    return root_logger


__all__ = ["ConsoleFormatter", "ROOT_LOGGER", "setup_logging"]
