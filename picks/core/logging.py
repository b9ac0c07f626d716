from __future__ import annotations

import logging
import sys

import structlog

from picks.core.config import settings


def configure_logging(level: str | None = None) -> None:
    """Configure stdlib logging plus structlog JSON output.

    Safe to call multiple times.
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stdout)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )
    structlog.contextvars.bind_contextvars(service=settings.service_name)
