"""
GitHub-backed view of the pull request under evaluation.
"""

import asyncio
from typing import Any

import structlog

from src.integrations.github.api import GitHubClient
from src.rules.approvals import ReviewEvent, build_approval_set
from src.rules.interface import PullRequestApi
from src.rules.reports import ReviewRequest

logger = structlog.get_logger(__name__)


class GitHubPullRequestApi(PullRequestApi):
    """
    PullRequestApi over the GitHub REST API.

    Args:
        client: Authenticated GitHub client
        repo: Repository full name (owner/repo)
        pull_request: The pull request object from the webhook payload
        installation_id: GitHub App installation ID
    """

    def __init__(self, client: GitHubClient, repo: str, pull_request: dict[str, Any], installation_id: int):
        self.client = client
        self.repo = repo
        self.pull_request = pull_request
        self.installation_id = installation_id
        self.number: int = pull_request["number"]
        self._reviews: list[ReviewEvent] | None = None
        self._reviews_lock = asyncio.Lock()

    def get_author(self) -> str:
        return self.pull_request["user"]["login"]

    @property
    def head_sha(self) -> str:
        return self.pull_request["head"]["sha"]

    async def list_modified_files(self) -> list[str]:
        files = await self.client.get_pull_request_files(self.repo, self.number, self.installation_id)
        return [file["filename"] for file in files]

    async def list_reviews(self) -> list[ReviewEvent]:
        """Review history of the pull request, fetched once per adapter."""
        async with self._reviews_lock:
            if self._reviews is None:
                raw_reviews = await self.client.get_pull_request_reviews(self.repo, self.number, self.installation_id)
                self._reviews = [event for event in map(ReviewEvent.from_github, raw_reviews) if event is not None]
            return self._reviews

    async def list_approved_reviews_authors(self, count_author: bool) -> list[str]:
        approvals = build_approval_set(await self.list_reviews(), self.get_author(), count_author)
        logger.debug("approvals_listed", repo=self.repo, pr_number=self.number, approvals=approvals)
        return approvals

    async def request_review(self, request: ReviewRequest) -> None:
        if request.is_empty:
            logger.debug("review_request_skipped", repo=self.repo, pr_number=self.number)
            return
        await self.client.request_reviewers(
            self.repo, self.number, request.users, request.teams, self.installation_id
        )
