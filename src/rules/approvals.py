"""
Approval set builder.

Turns the raw review history of a pull request into the set of logins that
currently approve it.
"""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from src.rules.utils import unique

COMMENTED = "commented"
APPROVED = "approved"


class ReviewEvent(BaseModel):
    """One submitted review."""

    author_login: str
    author_id: int
    review_id: int
    state: str

    @classmethod
    def from_github(cls, review: dict[str, Any]) -> "ReviewEvent | None":
        """Build from a GitHub REST review object. Reviews by deleted accounts have no user and are dropped."""
        user = review.get("user")
        if not user:
            return None
        return cls(
            author_login=user["login"],
            author_id=user["id"],
            review_id=review["id"],
            state=review.get("state", ""),
        )


def latest_reviews(reviews: Iterable[ReviewEvent]) -> list[ReviewEvent]:
    """
    The most recent decisive review of every reviewer, most recent first.

    Comments never change a reviewer's decision, so they are ignored. Review ids
    grow with submission time; the highest id per author wins.
    """
    latest: dict[int, ReviewEvent] = {}
    for review in reviews:
        if review.state.lower() == COMMENTED:
            continue
        current = latest.get(review.author_id)
        if current is None or review.review_id > current.review_id:
            latest[review.author_id] = review
    return sorted(latest.values(), key=lambda r: r.review_id, reverse=True)


def build_approval_set(reviews: Iterable[ReviewEvent], author: str, count_author: bool = False) -> list[str]:
    """
    Logins whose latest decisive review is an approval.

    Args:
        reviews: Raw review events, in any order
        author: Login of the pull request author
        count_author: Whether the author counts as an approver of their own pull request

    Returns:
        De-duplicated logins, most recent approval first, with the author
        prepended when count_author is set. Callers must only test membership.
    """
    approvals = [review.author_login for review in latest_reviews(reviews) if review.state.lower() == APPROVED]
    if count_author:
        return unique([author], approvals)
    return unique(approvals)
