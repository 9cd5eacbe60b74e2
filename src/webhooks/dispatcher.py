"""
Routes verified webhook events to the handler registered for their type.

approvalgate registers one handler per review-relevant event
(`pull_request`, `pull_request_review`); every other event is acknowledged
and skipped.
"""

from typing import Any

import structlog

from src.core.models import EventType, WebhookEvent
from src.webhooks.handlers.base import EventHandler

logger = structlog.get_logger(__name__)


class WebhookDispatcher:
    """Event type to handler table, filled by the application startup handler."""

    def __init__(self):
        self._handlers: dict[EventType, EventHandler] = {}

    def register_handler(self, event_type: EventType, handler: EventHandler):
        """Bind a handler to an event type. A second registration replaces the first."""
        if event_type in self._handlers:
            logger.warning("handler_overridden", event_type=event_type.value)
        self._handlers[event_type] = handler
        logger.info("handler_registered", event_type=event_type.value, handler=handler.__class__.__name__)

    async def dispatch(self, event: WebhookEvent) -> dict[str, Any]:
        """
        Hand an event to its handler.

        Returns:
            The acknowledgement sent back to GitHub: `skipped` when no handler
            is registered, `processed` with the handler's response, or `error`
            when the handler raised. Handler failures never reach the router.
        """
        handler = self._handlers.get(event.event_type)
        if not handler:
            logger.warning("handler_missing", event_type=event.event_type.value)
            return {"status": "skipped", "reason": f"No handler for event type {event.event_type.name}"}

        handler_name = handler.__class__.__name__
        try:
            logger.info("event_dispatched", event_type=event.event_type.value, handler=handler_name)
            response = await handler.handle(event)
            return {"status": "processed", "handler": handler_name, "result": response.model_dump()}
        except Exception as e:
            logger.exception("handler_failed", event_type=event.event_type.value, handler=handler_name)
            return {"status": "error", "reason": str(e)}


dispatcher = WebhookDispatcher()
