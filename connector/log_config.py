"""structlog setup."""

import logging

import structlog


def configure_logging(level: str | int = "INFO") -> None:
    """Configure structlog with level filtering, ISO timestamps and console output.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or a logging level int
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
