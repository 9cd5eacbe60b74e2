from typing import Any

import structlog

from src.core.config import config
from src.integrations.github.api import GitHubClient
from src.presentation import github_formatter
from src.rules.interface import ChecksApi
from src.rules.reports import PullRequestReport

logger = structlog.get_logger(__name__)

EXTERNAL_ID = "review-bot"


class CheckRunManager(ChecksApi):
    """
    Manager for the check run of a pull request head commit.

    A single check run per commit carries the review policy verdict. It is
    found by its external id and updated in place on every re-evaluation.
    """

    def __init__(
        self,
        github_client: GitHubClient,
        repo: str,
        sha: str,
        installation_id: int,
        name: str | None = None,
        details_url: str | None = None,
    ):
        self.github_client = github_client
        self.repo = repo
        self.sha = sha
        self.installation_id = installation_id
        self.name = name or config.review.check_run_name
        self.details_url = details_url

    async def publish_check_result(self, conclusion: str, title: str, summary: str, text: str) -> None:
        """
        Create the check run, or update the one a previous run left on this commit.

        Args:
            conclusion: "success", "failure", "neutral" or "action_required"
            title: Check run title
            summary: Short markdown summary
            text: Detailed markdown report
        """
        data: dict[str, Any] = {
            "name": self.name,
            "head_sha": self.sha,
            "external_id": EXTERNAL_ID,
            "status": "completed",
            "conclusion": conclusion,
            "output": {"title": title, "summary": summary, "text": text},
        }
        if self.details_url:
            data["details_url"] = self.details_url

        existing = await self._find_existing()
        if existing is not None:
            await self.github_client.update_check_run(self.repo, existing["id"], data, self.installation_id)
        else:
            await self.github_client.create_check_run(self.repo, data, self.installation_id)
        logger.info("check_run_published", repo=self.repo, sha=self.sha, conclusion=conclusion)

    async def publish_report(self, report: PullRequestReport) -> None:
        """Publish the verdict of a completed evaluation."""
        output = github_formatter.format_report_output(report)
        await self.publish_check_result(report.conclusion, **output)

    async def publish_error(self, error: Exception | str) -> None:
        """Publish a run-aborting error as a failed check."""
        output = github_formatter.format_error_output(error)
        await self.publish_check_result("failure", **output)

    async def publish_missing_config(self, config_path: str) -> None:
        """Publish a neutral check for a repository without a review policy."""
        output = github_formatter.format_missing_config_output(config_path)
        await self.publish_check_result("neutral", **output)

    async def _find_existing(self) -> dict[str, Any] | None:
        check_runs = await self.github_client.get_check_runs(self.repo, self.sha, self.installation_id)
        for check_run in check_runs:
            if check_run.get("external_id") == EXTERNAL_ID:
                return check_run
        return None
