import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from src.core.models import EventType, WebhookEvent
from src.webhooks.auth import verify_github_signature
from src.webhooks.dispatcher import WebhookDispatcher, dispatcher

logger = structlog.get_logger(__name__)
router = APIRouter()


# Dependency provider for the dispatcher instance.
# This makes it easy to manage its lifecycle and use it in tests.
def get_dispatcher() -> WebhookDispatcher:
    """Returns the shared WebhookDispatcher instance."""
    return dispatcher


def _create_event_from_request(event_name: str | None, payload: dict, delivery_id: str | None = None) -> WebhookEvent:
    """Factory function to create a WebhookEvent from raw request data."""
    if not event_name:
        raise HTTPException(status_code=400, detail="Missing X-GitHub-Event header")

    try:
        # Map the string from the header (e.g., "pull_request") to our enum
        event_type = EventType(event_name)
    except ValueError as e:
        logger.info("event_unsupported", event_name=event_name)
        # Acknowledge receipt so GitHub does not retry, but do no work
        raise HTTPException(status_code=202, detail=f"Event type '{event_name}' is received but not supported.") from e

    return WebhookEvent(event_type=event_type, payload=payload, delivery_id=delivery_id)


@router.post("/github", summary="Endpoint for all GitHub webhooks")
async def github_webhook_endpoint(
    request: Request,
    is_verified: bool = Depends(verify_github_signature),
    dispatcher_instance: WebhookDispatcher = Depends(get_dispatcher),
):
    """
    This endpoint receives all events from a configured GitHub App.

    - It first verifies the request signature to ensure it's from GitHub.
    - It then creates a domain event object from the request payload.
    - Finally, it passes the event to a dispatcher to be routed to the
      correct handler.
    """
    # The 'is_verified' dependency raises on failure

    try:
        payload = await request.json()
    except ValueError as e:
        raise HTTPException(status_code=400, detail="Invalid JSON payload") from e

    event_name = request.headers.get("X-GitHub-Event")
    delivery_id = request.headers.get("X-GitHub-Delivery")

    try:
        event = _create_event_from_request(event_name, payload, delivery_id)
    except HTTPException as e:
        # Unsupported events are not server errors
        if e.status_code == 202:
            return {"status": "event received but not supported", "detail": e.detail}
        raise

    result = await dispatcher_instance.dispatch(event)
    return {"status": "event dispatched successfully", "result": result}
