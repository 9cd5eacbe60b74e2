from abc import ABC, abstractmethod
from functools import lru_cache

import structlog

from src.core.models import EventType, WebhookEvent
from src.event_processors.pull_request.processor import ReviewPolicyProcessor
from src.tasks.task_queue import task_queue
from src.webhooks.models import WebhookResponse

logger = structlog.get_logger()


# Instantiate processor once (singleton-like) but lazily
@lru_cache(maxsize=1)
def get_review_processor() -> ReviewPolicyProcessor:
    return ReviewPolicyProcessor()


class EventHandler(ABC):
    """
    Abstract base class for all webhook event handlers.

    Each implementation must return a WebhookResponse for standardized results.
    Handlers should be thin orchestrators that delegate to event_processors.
    """

    @abstractmethod
    async def handle(self, event: WebhookEvent) -> WebhookResponse:
        """
        Process the incoming webhook event.

        Args:
            event: The validated and parsed WebhookEvent object.

        Returns:
            A WebhookResponse containing the results of the handling logic.
        """
        pass


class ReviewRunHandler(EventHandler):
    """Enqueues a review policy run for the pull request of an event, for the relevant actions only."""

    event_type: EventType
    actions: frozenset[str] = frozenset()

    async def handle(self, event: WebhookEvent) -> WebhookResponse:
        action = event.payload.get("action")
        log = logger.bind(
            event_type=self.event_type.value,
            repo=event.repo_full_name,
            pr_number=event.pull_request.get("number"),
            action=action,
        )

        if action not in self.actions:
            log.info("event_action_ignored")
            return WebhookResponse(
                status="ignored",
                detail=f"Action '{action}' is not processed",
                event_type=self.event_type.value,
            )

        log.info("review_run_requested")
        try:
            processor = get_review_processor()
            enqueued = await task_queue.enqueue(
                processor.process,
                self.event_type.value,
                event.payload,
                event,
                delivery_id=event.delivery_id,
            )
        except Exception as e:
            log.error("review_run_enqueue_failed", error=str(e), exc_info=True)
            return WebhookResponse(
                status="error", detail=f"Review run could not be enqueued: {e}", event_type=self.event_type.value
            )

        if not enqueued:
            log.info("review_run_duplicate_skipped")
            return WebhookResponse(status="ignored", detail="Duplicate event skipped", event_type=self.event_type.value)

        log.info("review_run_enqueued")
        return WebhookResponse(
            status="ok", detail="Review policy run enqueued for processing", event_type=self.event_type.value
        )
