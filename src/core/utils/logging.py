"""
Structured logging utilities.

Configures structlog for the service and provides a context manager for
structured operation logging with timing and error tracking.
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO", fmt: str = "console") -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        fmt: "console" for human readable output, "json" for one JSON object per line
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stdout)

    renderer: Any = structlog.processors.JSONRenderer() if fmt == "json" else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def log_operation(
    operation: str,
    log: Any = None,
    **context: Any,
) -> Any:  # AsyncGenerator[None, None]
    """
    Context manager for structured operation logging.

    Logs operation start, completion, and errors with timing information.

    Args:
        operation: Name of the operation being performed
        log: Bound logger to emit on (defaults to this module's logger)
        **context: Additional context to include in logs

    Example:
        async with log_operation("policy_evaluation", log, repo=repo, pr_number=pr_number):
            report = await engine.evaluate(...)
    """
    log = (log or logger).bind(operation=operation, **context)
    start_time = time.time()

    log.info("operation_started")

    try:
        yield
    except Exception as e:
        latency_ms = int((time.time() - start_time) * 1000)
        log.error("operation_failed", error=str(e), latency_ms=latency_ms)
        raise
    else:
        latency_ms = int((time.time() - start_time) * 1000)
        log.info("operation_completed", latency_ms=latency_ms)
