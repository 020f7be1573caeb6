"""
Centralized logging configuration for the aggregation client.

This module provides standardized logging configuration using structlog
for all components. Module loggers are lazy proxies and must not be bound
at import time, since binding freezes them to whatever configuration is
active at that moment.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger

AGGREGATION_SUBSYSTEM = "aggregation"


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
    """
    log_level = getattr(logging, level.upper())

    # Logs go to stderr so that rendered reports on stdout stay clean
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(message)s"
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Lazy structlog logger; configuration is resolved on first use
    """
    return structlog.get_logger(name)


def log_category_outcome(
    logger: FilteringBoundLogger,
    identifier: str,
    category: str,
    succeeded: bool,
    record_count: int = 0,
    reason: Optional[str] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the outcome of one category fetch with standardized format.

    Args:
        logger: Structlog logger instance
        identifier: Security identifier being queried
        category: Category name
        succeeded: Whether the fetch produced an outcome with records
        record_count: Number of decoded records
        reason: Failure reason, when the fetch failed
        context: Additional context data
    """
    bound_logger = logger.bind(
        subsystem=AGGREGATION_SUBSYSTEM,
        identifier=identifier,
        category=category,
        category_result="OK" if succeeded else "FAILED",
        record_count=record_count,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if succeeded:
        bound_logger.info("Category fetched")
    else:
        bound_logger.warning("Category fetch failed", reason=reason)
