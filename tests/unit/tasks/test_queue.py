import asyncio
from unittest.mock import AsyncMock

import pytest

from src.tasks.task_queue import TaskQueue


class TestTaskQueue:
    """Test TaskQueue deduplication and execution."""

    @pytest.fixture
    def queue(self) -> TaskQueue:
        """Create a fresh TaskQueue instance for each test."""
        return TaskQueue()

    @pytest.fixture
    def sample_payload(self) -> dict[str, object]:
        """Sample GitHub webhook payload."""
        return {
            "action": "submitted",
            "installation": {"id": 99},
            "repository": {"id": 123, "full_name": "octocat/test"},
            "pull_request": {"number": 42},
        }

    @pytest.mark.asyncio
    async def test_enqueue_success(self, queue: TaskQueue, sample_payload: dict[str, object]) -> None:
        handler = AsyncMock()

        result = await queue.enqueue(handler, "pull_request_review", sample_payload)

        assert result is True
        assert queue.queue.qsize() == 1
        assert len(queue.processed_hashes) == 1

    @pytest.mark.asyncio
    async def test_enqueue_deduplication(self, queue: TaskQueue, sample_payload: dict[str, object]) -> None:
        handler = AsyncMock()

        assert await queue.enqueue(handler, "pull_request_review", sample_payload) is True
        assert await queue.enqueue(handler, "pull_request_review", sample_payload) is False
        assert queue.queue.qsize() == 1

    @pytest.mark.asyncio
    async def test_delivery_id_identifies_event(self, queue: TaskQueue, sample_payload: dict[str, object]) -> None:
        handler = AsyncMock()

        assert await queue.enqueue(handler, "pull_request_review", sample_payload, delivery_id="d-1") is True
        # Same payload, new delivery: a genuine second event
        assert await queue.enqueue(handler, "pull_request_review", sample_payload, delivery_id="d-2") is True
        # Redelivery of d-1, even with a changed payload
        changed = {**sample_payload, "action": "edited"}
        assert await queue.enqueue(handler, "pull_request_review", changed, delivery_id="d-1") is False

        assert queue.queue.qsize() == 2

    @pytest.mark.asyncio
    async def test_different_events_not_deduplicated(
        self, queue: TaskQueue, sample_payload: dict[str, object]
    ) -> None:
        handler = AsyncMock()

        await queue.enqueue(handler, "pull_request_review", sample_payload)
        await queue.enqueue(handler, "pull_request", sample_payload)

        assert queue.queue.qsize() == 2

    def test_task_id_is_stable(self, queue: TaskQueue, sample_payload: dict[str, object]) -> None:
        reordered = dict(reversed(list(sample_payload.items())))

        assert queue._generate_task_id("pull_request", sample_payload) == queue._generate_task_id(
            "pull_request", reordered
        )

    @pytest.mark.asyncio
    async def test_worker_runs_task(self, queue: TaskQueue, sample_payload: dict[str, object]) -> None:
        handler = AsyncMock()

        await queue.start_workers(num_workers=1)
        try:
            await queue.enqueue(handler, "pull_request", sample_payload, "event-arg", delivery_id="d-1", flag=True)
            await asyncio.wait_for(queue.queue.join(), timeout=1)
        finally:
            await queue.stop_workers()

        handler.assert_awaited_once_with("event-arg", flag=True)
        assert queue.workers == []

    @pytest.mark.asyncio
    async def test_worker_survives_failing_task(self, queue: TaskQueue, sample_payload: dict[str, object]) -> None:
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        handler = AsyncMock()

        await queue.start_workers(num_workers=1)
        try:
            await queue.enqueue(failing, "pull_request", sample_payload, delivery_id="d-1")
            await queue.enqueue(handler, "pull_request", sample_payload, delivery_id="d-2")
            await asyncio.wait_for(queue.queue.join(), timeout=1)
        finally:
            await queue.stop_workers()

        failing.assert_awaited_once()
        handler.assert_awaited_once()
