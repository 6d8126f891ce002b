"""
Structured logging configuration using structlog.

JSON output in production, coloured console output in development.
Also provides timed_operation() for logging how long a block of work took.
"""
import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Iterator

import structlog

# Libraries that are too chatty at INFO for a history service
_NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "aiosqlite")


def setup_logging(log_level: str = "INFO", json_format: bool = True) -> None:
    """
    Configure structlog for structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, output JSON format (for production).
                     If False, output human-readable format (for development).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    processors: list[Any] = [
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
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, usually named after the calling module."""
    return structlog.get_logger(name)


@contextmanager
def timed_operation(logger: Any, operation: str, **context: Any) -> Iterator[dict]:
    """
    Log how long a block took.

    Yields a dict the block may fill with extra fields (e.g. result sizes)
    that are added to the completion event. Failures are logged with the
    elapsed time and re-raised.
    """
    extra: dict = {}
    started = time.perf_counter()
    try:
        yield extra
    except Exception:
        logger.warning(
            "Operation failed",
            operation=operation,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
            **context,
        )
        raise
    logger.debug(
        "Operation completed",
        operation=operation,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
        **context,
        **extra,
    )
