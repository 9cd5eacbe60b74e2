import asyncio
import hashlib
import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

import structlog
from cachetools import TTLCache

logger = structlog.get_logger(__name__)


@dataclass
class Task:
    """A unit of background work: one handler call for one webhook delivery."""

    task_id: str
    event_type: str
    payload: dict[str, Any]
    func: Callable[..., Awaitable[Any]]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    delivery_id: str | None = None


class TaskQueue:
    """
    In-memory queue processing webhook work in the background, with deduplication.

    GitHub retries deliveries and sometimes sends the same event twice; an event
    already seen within the deduplication window is not enqueued again.
    """

    def __init__(self, max_tracked: int = 10_000, dedup_ttl_seconds: int = 3600):
        self.queue: asyncio.Queue[Task] = asyncio.Queue()
        self.processed_hashes: TTLCache = TTLCache(maxsize=max_tracked, ttl=dedup_ttl_seconds)
        self.workers: list[asyncio.Task[None]] = []

    def _generate_task_id(self, event_type: str, payload: dict[str, Any], delivery_id: str | None = None) -> str:
        """Stable identifier of an event. A delivery id, when known, identifies the event on its own."""
        if delivery_id:
            key = f"{event_type}:{delivery_id}"
        else:
            key = f"{event_type}:{json.dumps(payload, sort_keys=True, default=str)}"
        return hashlib.sha256(key.encode()).hexdigest()

    async def enqueue(
        self,
        func: Callable[..., Awaitable[Any]],
        event_type: str,
        payload: dict[str, Any],
        *args: Any,
        delivery_id: str | None = None,
        **kwargs: Any,
    ) -> bool:
        """
        Enqueue a handler call.

        Args:
            func: Coroutine function run by a worker as func(*args, **kwargs)
            event_type: GitHub event name, part of the deduplication key
            payload: Webhook payload, part of the deduplication key
            delivery_id: X-GitHub-Delivery header value, if known

        Returns:
            False if the event was already enqueued, True otherwise.
        """
        task_id = self._generate_task_id(event_type, payload, delivery_id)
        if task_id in self.processed_hashes:
            logger.info("task_duplicate_skipped", event_type=event_type, task_id=task_id)
            return False

        self.processed_hashes[task_id] = True
        task = Task(
            task_id=task_id,
            event_type=event_type,
            payload=payload,
            func=func,
            args=args,
            kwargs=kwargs,
            delivery_id=delivery_id,
        )
        await self.queue.put(task)
        logger.info("task_enqueued", event_type=event_type, task_id=task_id, queue_size=self.queue.qsize())
        return True

    async def start_workers(self, num_workers: int = 1) -> None:
        """Start background workers."""
        for i in range(num_workers):
            self.workers.append(asyncio.create_task(self._worker(f"worker-{i}")))
        logger.info("task_workers_started", count=num_workers)

    async def stop_workers(self) -> None:
        """Stop background workers."""
        for worker in self.workers:
            worker.cancel()
        await asyncio.gather(*self.workers, return_exceptions=True)
        self.workers.clear()
        logger.info("task_workers_stopped")

    async def _worker(self, worker_name: str) -> None:
        """Background worker that processes tasks until cancelled."""
        while True:
            task = await self.queue.get()
            log = logger.bind(worker=worker_name, task_id=task.task_id, event_type=task.event_type)
            try:
                log.info("task_started")
                await task.func(*task.args, **task.kwargs)
                log.info("task_completed")
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # One failing task must not stop the worker
                log.error("task_failed", error=str(e), exc_info=True)
            finally:
                self.queue.task_done()


# Global task queue instance
task_queue = TaskQueue()
