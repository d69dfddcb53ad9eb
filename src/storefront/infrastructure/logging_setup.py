"""Logging configuration for the command line.

Modules log through ``structlog.get_logger(__name__)`` with an event
string plus key/value context; the stdlib handler below is only the sink.
"""

from __future__ import annotations

import logging
import sys

import structlog


def setup_stdlib_logging(level: int) -> None:
    """Send ``storefront`` records to stderr; quiet the HTTP client libraries."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    app_logger = logging.getLogger("storefront")
    app_logger.handlers = [handler]
    app_logger.setLevel(level)
    app_logger.propagate = False

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def setup_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.contextvars.merge_contextvars,
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def configure_logging(verbose: bool = False) -> None:
    """Configure all logging for the CLI; ``verbose`` enables DEBUG."""
    setup_stdlib_logging(logging.DEBUG if verbose else logging.INFO)
    setup_structlog()
