"""Tests for building the approval set from review history."""

from src.rules.approvals import ReviewEvent, build_approval_set, latest_reviews


def review(login: str, review_id: int, state: str, user_id: int) -> ReviewEvent:
    return ReviewEvent(author_login=login, author_id=user_id, review_id=review_id, state=state)


class TestLatestReviews:
    def test_latest_decisive_review_wins(self) -> None:
        reviews = [
            review("alice", 1, "APPROVED", 1),
            review("alice", 2, "CHANGES_REQUESTED", 1),
            review("bob", 3, "APPROVED", 2),
        ]

        latest = latest_reviews(reviews)

        assert [(r.author_login, r.state) for r in latest] == [("bob", "APPROVED"), ("alice", "CHANGES_REQUESTED")]

    def test_comments_do_not_override_approval(self) -> None:
        reviews = [review("alice", 1, "APPROVED", 1), review("alice", 2, "COMMENTED", 1)]

        assert [r.review_id for r in latest_reviews(reviews)] == [1]

    def test_order_of_input_is_irrelevant(self) -> None:
        reviews = [review("alice", 5, "APPROVED", 1), review("alice", 2, "CHANGES_REQUESTED", 1)]

        assert latest_reviews(reviews)[0].state == "APPROVED"


class TestBuildApprovalSet:
    def test_approvals_most_recent_first(self) -> None:
        reviews = [
            review("alice", 1, "APPROVED", 1),
            review("bob", 4, "APPROVED", 2),
            review("carol", 3, "DISMISSED", 3),
        ]

        assert build_approval_set(reviews, author="dave") == ["bob", "alice"]

    def test_revoked_approval_not_counted(self) -> None:
        reviews = [review("alice", 1, "APPROVED", 1), review("alice", 2, "DISMISSED", 1)]

        assert build_approval_set(reviews, author="dave") == []

    def test_author_prepended_when_counted(self) -> None:
        reviews = [review("alice", 1, "APPROVED", 1)]

        assert build_approval_set(reviews, author="dave", count_author=True) == ["dave", "alice"]
        assert build_approval_set(reviews, author="dave") == ["alice"]

    def test_author_listed_once(self) -> None:
        reviews = [review("Dave", 1, "APPROVED", 4)]

        assert build_approval_set(reviews, author="dave", count_author=True) == ["dave"]

    def test_review_by_deleted_account_dropped(self) -> None:
        assert ReviewEvent.from_github({"id": 1, "user": None, "state": "APPROVED"}) is None

    def test_from_github(self) -> None:
        event = ReviewEvent.from_github({"id": 7, "user": {"login": "alice", "id": 3}, "state": "APPROVED"})

        assert event == ReviewEvent(author_login="alice", author_id=3, review_id=7, state="APPROVED")
