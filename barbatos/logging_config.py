"""
Barbatos Structured Logging Module
JSON-based structured logging for cache clients and test harnesses
"""

import logging
import os
import sys
from typing import Optional

import structlog
from pythonjsonlogger import jsonlogger

# ============================================================================
# STRUCTURED LOGGING CONFIGURATION
# ============================================================================

def setup_json_logging(
    log_level: str = "INFO",
    service_name: str = "barbatos",
    environment: Optional[str] = None
):
    """
    Setup JSON structured logging

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service_name: Name of the service embedding the cache
        environment: Environment name (defaults to $BARBATOS_ENV or "development")
    """
    if environment is None:
        environment = os.getenv("BARBATOS_ENV", "development")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.ExceptionRenderer(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, log_level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Records emitted through the stdlib (redis-py, pytest) use the same format
    json_handler = logging.StreamHandler(sys.stdout)
    json_formatter = jsonlogger.JsonFormatter(
        fmt='%(timestamp)s %(level)s %(name)s %(message)s',
        timestamp=True
    )
    json_handler.setFormatter(json_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level))
    root_logger.handlers.clear()
    root_logger.addHandler(json_handler)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        service=service_name,
        environment=environment,
    )


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """
    Get a structured logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Bound structlog logger instance
    """
    return structlog.get_logger(name)


# ============================================================================
# LOGGING CONTEXT MANAGERS
# ============================================================================

class LogContext:
    """
    Bind fields for a multi-step operation and log its failure once

    The exception is logged under `event` through log_error and then
    propagates unchanged.
    """

    def __init__(self, logger: structlog.BoundLogger, event: str, **context):
        self.logger = logger.bind(**context)
        self.event = event

    def __enter__(self):
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_val is not None:
            log_error(self.logger, exc_val, self.event)
        return False


def log_error(
    logger: structlog.BoundLogger,
    error: Exception,
    context: str,
    **extra
):
    """
    Log an exception with its type, message and traceback

    Args:
        logger: Structlog logger instance
        error: Exception instance
        context: Event name
        **extra: Additional context fields
    """
    logger.error(
        context,
        error_type=type(error).__name__,
        error_message=str(error),
        exc_info=error,
        **extra
    )


def log_cache_operation(
    logger: structlog.BoundLogger,
    backend: str,
    operation: str,
    result: str,
    duration_ms: float,
    **extra
):
    """
    Log a single cache operation

    Args:
        logger: Structlog logger instance
        backend: Backend name (redis, mock)
        operation: Contract operation name
        result: Outcome (ok, miss, error)
        duration_ms: Operation duration in milliseconds
        **extra: Additional context fields
    """
    level = "warning" if result == "error" else "debug"
    getattr(logger, level)(
        "cache_operation",
        backend=backend,
        operation=operation,
        result=result,
        duration_ms=round(duration_ms, 2),
        **extra
    )

