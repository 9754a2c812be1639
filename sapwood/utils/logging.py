"""Structured logging setup."""

import logging
import sys

import structlog


def setup_logging(
    log_level: str = "INFO", log_format: str = "json"
) -> structlog.typing.FilteringBoundLogger:
    """Configure structlog for the process.

    Log lines are written to stderr so command output on stdout stays clean.

    Args:
        log_level: Minimum level to emit
        log_format: ``json`` for machine readable lines, ``plain`` for console output

    Returns:
        Logger bound to the ``sapwood`` name
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    return structlog.get_logger("sapwood")
