"""
Shared utilities for caching, logging and retry handling.
"""

from src.core.utils.caching import RunCache
from src.core.utils.logging import configure_logging, log_operation
from src.core.utils.retry import retry_with_backoff

__all__ = [
    "RunCache",
    "configure_logging",
    "log_operation",
    "retry_with_backoff",
]
