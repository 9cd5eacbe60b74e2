from src.core.models import EventType
from src.webhooks.handlers.base import ReviewRunHandler


class PullRequestEventHandler(ReviewRunHandler):
    """Re-evaluates the review policy when the pull request or its files change."""

    event_type = EventType.PULL_REQUEST
    actions = frozenset({"opened", "reopened", "synchronize", "ready_for_review"})
