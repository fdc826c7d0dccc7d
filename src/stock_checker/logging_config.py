"""
Structured logging setup.

Modules log with ``structlog.get_logger(__name__)`` and snake_case event
names; this wires the processors once per process.
"""

import logging
import sys

import structlog

from stock_checker.config import LoggingSettings


def configure_logging(settings: LoggingSettings) -> None:
    """Configure structlog for console or JSON output at the configured level."""
    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if settings.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_log_level,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        # stderr keeps report output on stdout clean
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
