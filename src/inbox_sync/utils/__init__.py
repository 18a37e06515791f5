"""Utility functions for Inbox Sync."""

import logging
import sys

import structlog
from structlog.typing import Processor

from inbox_sync.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog to drop events below `settings.log_level`.

    Args:
        settings: Application settings.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.debug:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
