from enum import Enum
from typing import Any


class EventType(Enum):
    """Supported GitHub event types."""

    PULL_REQUEST = "pull_request"
    PULL_REQUEST_REVIEW = "pull_request_review"


class WebhookEvent:
    """
    A representation of an incoming webhook event, before it has been
    handed to a processor.
    """

    def __init__(self, event_type: EventType, payload: dict[str, Any], delivery_id: str | None = None):
        self.event_type = event_type
        self.payload = payload
        self.delivery_id = delivery_id
        self.repository = payload.get("repository", {})
        self.sender = payload.get("sender", {})
        self.installation_id = payload.get("installation", {}).get("id")

    @property
    def repo_full_name(self) -> str:
        """The full name of the repository (e.g., 'owner/repo')."""
        return self.repository.get("full_name", "")

    @property
    def sender_login(self) -> str:
        """The GitHub username of the user who triggered the event."""
        return self.sender.get("login", "")

    @property
    def pull_request(self) -> dict[str, Any]:
        """The pull request object; present on both pull_request and pull_request_review events."""
        return self.payload.get("pull_request", {})
