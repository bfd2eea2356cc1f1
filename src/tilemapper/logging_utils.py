"""
Centralized logging utilities for the tilemapper application.

Defines a shared logger instance and setup function to ensure consistent
logging configuration across the codebase, plus a small reporter
interface so pipeline stages receive their log sink from the caller
instead of reaching for the shared logger directly.
"""

from __future__ import annotations

import logging
from typing import Protocol


def setup_logger(
        name: str = __name__,
        level: int = logging.INFO,
        formatter: logging.Formatter | None = None,
        handler: logging.Handler | None = None,
) -> logging.Logger:
    """
    Configure a logger with optional custom formatting and handler.

    Creates a module-level logger with sensible defaults for level and
    formatting. Custom handlers and formatters can be supplied if
    needed.

    Args:
        name: Logger name, typically set to __name__.
        level: Logging level (e.g., logging.INFO, logging.DEBUG).
        formatter: Optional custom formatter.
        handler: Optional custom handler.

    Returns:
        A configured logger instance.

    """
    logger_instance = logging.getLogger(name)
    logger_instance.setLevel(level)
    if not logger_instance.handlers:
        if formatter is None:
            formatter = logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s")
        if handler is None:
            handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger_instance.addHandler(handler)
        logger_instance.propagate = False
    return logger_instance


# Shared logger used across modules
logger = setup_logger("tilemapper")


class Reporter(Protocol):
    """Sink for progress and diagnostic messages from pipeline stages."""

    def debug(self, msg: str, *args: object) -> None: ...

    def info(self, msg: str, *args: object) -> None: ...

    def warning(self, msg: str, *args: object) -> None: ...

    def fatal(self, msg: str, *args: object) -> None: ...


class LoggerReporter:
    """
    Reporter backed by a standard library logger.

    ``fatal`` records at ERROR level only; deciding whether to stop the
    process is left to the outermost caller.
    """

    def __init__(self, target: logging.Logger | None = None) -> None:
        self.logger = target if target is not None else logger

    def debug(self, msg: str, *args: object) -> None:
        self.logger.debug(msg, *args)

    def info(self, msg: str, *args: object) -> None:
        self.logger.info(msg, *args)

    def warning(self, msg: str, *args: object) -> None:
        self.logger.warning(msg, *args)

    def fatal(self, msg: str, *args: object) -> None:
        self.logger.error(msg, *args)


def resolve_reporter(reporter: Reporter | None) -> Reporter:
    """Return ``reporter`` or a reporter bound to the shared logger."""
    return reporter if reporter is not None else LoggerReporter(logger)


def set_verbose(*, verbose: bool) -> None:
    """Switch the shared logger between INFO and DEBUG output."""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
