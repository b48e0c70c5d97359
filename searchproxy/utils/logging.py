"""
Logging utilities for the search proxy.

Provides structured logging with JSON output for better observability.
"""

import logging
import sys
from typing import Any

import structlog


def setup_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Set up structured logging for the proxy process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Whether to output JSON format logs
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors: list = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]
    if json_logs:
        processors += [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"), structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance with the given name."""
    return structlog.get_logger(name)


def log_search_event(logger: structlog.BoundLogger, event_type: str, query: str, **kwargs: Any) -> None:
    """
    Log a search event with structured data.

    Args:
        logger: Structured logger instance
        event_type: Type of event (search_started, search_completed, search_failed, ...)
        query: Query text being served
        **kwargs: Additional event data
    """
    event_data = {"query": query, **kwargs}

    if event_type.endswith("_error") or event_type.endswith("_failed"):
        logger.error(event_type, **event_data)
    elif event_type.endswith("_warning"):
        logger.warning(event_type, **event_data)
    else:
        logger.info(event_type, **event_data)
