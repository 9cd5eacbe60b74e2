from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.core.models import EventType, WebhookEvent
from src.tasks.task_queue import TaskQueue
from src.webhooks.dispatcher import WebhookDispatcher
from src.webhooks.handlers.pull_request import PullRequestEventHandler
from src.webhooks.handlers.pull_request_review import PullRequestReviewEventHandler
from src.webhooks.models import WebhookResponse


def make_event(event_type: EventType, action: str, delivery_id: str | None = "delivery-1") -> WebhookEvent:
    payload = {
        "action": action,
        "installation": {"id": 99},
        "repository": {"full_name": "octocat/service"},
        "pull_request": {"number": 42},
    }
    return WebhookEvent(event_type=event_type, payload=payload, delivery_id=delivery_id)


@pytest.fixture
def queue():
    queue = TaskQueue()
    processor = MagicMock()
    processor.process = AsyncMock()
    with (
        patch("src.webhooks.handlers.base.task_queue", queue),
        patch("src.webhooks.handlers.base.get_review_processor", return_value=processor),
    ):
        yield queue


class TestReviewRunHandlers:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["opened", "reopened", "synchronize", "ready_for_review"])
    async def test_pull_request_actions_enqueue_run(self, queue, action) -> None:
        event = make_event(EventType.PULL_REQUEST, action)

        response = await PullRequestEventHandler().handle(event)

        assert response.status == "ok"
        assert response.event_type == "pull_request"
        task = queue.queue.get_nowait()
        assert task.args == (event,)
        assert task.delivery_id == "delivery-1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["submitted", "edited", "dismissed"])
    async def test_review_actions_enqueue_run(self, queue, action) -> None:
        response = await PullRequestReviewEventHandler().handle(make_event(EventType.PULL_REQUEST_REVIEW, action))

        assert response.status == "ok"
        assert queue.queue.qsize() == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("action", ["closed", "labeled", "assigned"])
    async def test_other_actions_ignored(self, queue, action) -> None:
        response = await PullRequestEventHandler().handle(make_event(EventType.PULL_REQUEST, action))

        assert response.status == "ignored"
        assert queue.queue.qsize() == 0

    @pytest.mark.asyncio
    async def test_redelivery_skipped(self, queue) -> None:
        handler = PullRequestEventHandler()

        await handler.handle(make_event(EventType.PULL_REQUEST, "opened"))
        response = await handler.handle(make_event(EventType.PULL_REQUEST, "opened"))

        assert response.status == "ignored"
        assert response.detail == "Duplicate event skipped"
        assert queue.queue.qsize() == 1

    @pytest.mark.asyncio
    async def test_enqueue_failure_reported(self) -> None:
        failing_queue = MagicMock()
        failing_queue.enqueue = AsyncMock(side_effect=RuntimeError("queue closed"))

        with (
            patch("src.webhooks.handlers.base.task_queue", failing_queue),
            patch("src.webhooks.handlers.base.get_review_processor", return_value=MagicMock()),
        ):
            response = await PullRequestEventHandler().handle(make_event(EventType.PULL_REQUEST, "opened"))

        assert response.status == "error"
        assert "queue closed" in response.detail


class TestWebhookDispatcher:
    @pytest.mark.asyncio
    async def test_dispatches_to_registered_handler(self) -> None:
        handler = MagicMock()
        handler.handle = AsyncMock(return_value=WebhookResponse(status="ok", event_type="pull_request"))
        dispatcher = WebhookDispatcher()
        dispatcher.register_handler(EventType.PULL_REQUEST, handler)

        result = await dispatcher.dispatch(make_event(EventType.PULL_REQUEST, "opened"))

        assert result["status"] == "processed"
        assert result["result"]["status"] == "ok"

    @pytest.mark.asyncio
    async def test_no_handler(self) -> None:
        result = await WebhookDispatcher().dispatch(make_event(EventType.PULL_REQUEST_REVIEW, "submitted"))

        assert result["status"] == "skipped"

    @pytest.mark.asyncio
    async def test_handler_error(self) -> None:
        handler = MagicMock()
        handler.handle = AsyncMock(side_effect=RuntimeError("boom"))
        dispatcher = WebhookDispatcher()
        dispatcher.register_handler(EventType.PULL_REQUEST, handler)

        result = await dispatcher.dispatch(make_event(EventType.PULL_REQUEST, "opened"))

        assert result == {"status": "error", "reason": "boom"}
