from src.core.models import EventType
from src.webhooks.handlers.base import ReviewRunHandler


class PullRequestReviewEventHandler(ReviewRunHandler):
    """Re-evaluates the review policy when a review is submitted, edited or dismissed."""

    event_type = EventType.PULL_REQUEST_REVIEW
    actions = frozenset({"submitted", "edited", "dismissed"})
