"""
Per-run memoization for expensive lookups.

A policy evaluation asks for the same team roster, review list or rank roster
many times across rules. RunCache makes every such lookup happen at most once per
run: values are loaded lazily on first use and kept until the run ends. There is
no TTL and no invalidation; a new run gets a new cache.
"""

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class RunCache:
    """
    Async get-or-load cache scoped to one evaluation run.

    Concurrent callers asking for the same key wait on a per-key lock, so the
    loader runs once even when sub-requirements are resolved concurrently.

    Example:
        cache = RunCache()
        members = await cache.get_or_load(("team", "core"), lambda: api.list_team_members("core"))
    """

    def __init__(self) -> None:
        self._values: dict[Hashable, Any] = {}
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self.hits = 0
        self.misses = 0

    def __contains__(self, key: Hashable) -> bool:
        return key in self._values

    def _lock_for(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def get_or_load(self, key: Hashable, loader: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached value for key, running loader on the first request.

        Args:
            key: Cache key, e.g. ("team", "core")
            loader: Zero-argument coroutine factory producing the value

        Returns:
            The memoized value

        Note:
            A loader that raises leaves the key empty; the error propagates and
            aborts the run, so no retry happens within the same run.
        """
        if key in self._values:
            self.hits += 1
            logger.debug("run_cache_hit", key=key)
            return self._values[key]

        async with self._lock_for(key):
            if key in self._values:
                self.hits += 1
                logger.debug("run_cache_hit", key=key)
                return self._values[key]

            self.misses += 1
            logger.debug("run_cache_miss", key=key)
            value = await loader()
            self._values[key] = value
            return value

    def size(self) -> int:
        """Number of memoized entries."""
        return len(self._values)
