"""Structured logging configuration for ledgerbook."""

import logging
import os
import sys
from typing import Literal, Optional

import structlog

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def configure_logging(
    level: Optional[LogLevel] = None,
    format: Optional[LogFormat] = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level. Defaults to LEDGERBOOK_LOG_LEVEL, then WARNING.
        format: Output format (json or console). Defaults to
            LEDGERBOOK_LOG_FORMAT, then console.
    """
    log_level = (level or os.environ.get("LEDGERBOOK_LOG_LEVEL") or "WARNING").upper()
    log_format = format or os.environ.get("LEDGERBOOK_LOG_FORMAT") or "console"

    # Logs go to stderr so command output stays clean
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level, logging.WARNING),
        force=True,
    )

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback,
        )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance bound to the given name."""
    return structlog.get_logger(name)
