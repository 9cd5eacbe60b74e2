import time

import structlog

from src.core.config import config
from src.core.config.review_config import ReviewConfig
from src.core.errors import RulesFileNotFoundError
from src.core.models import WebhookEvent
from src.event_processors.base import BaseEventProcessor, ProcessingResult, ProcessingState
from src.integrations.fellows import RosterFellowsApi
from src.integrations.github import GitHubClient, github_client
from src.integrations.github.check_runs import CheckRunManager
from src.integrations.github.pull_request import GitHubPullRequestApi
from src.integrations.github.teams import GitHubTeamsApi
from src.rules.context import ReviewContext
from src.rules.engine import ReviewPolicyEngine
from src.rules.interface import FellowsApi, PolicyLoader
from src.rules.loaders import GitHubPolicyLoader

logger = structlog.get_logger(__name__)


class ReviewPolicyProcessor(BaseEventProcessor):
    """
    Evaluates the review policy of a pull request and publishes the verdict.

    One run: load the policy, evaluate every rule, request the missing reviewers
    (when enabled) and publish a check run on the head commit. A run that cannot
    be evaluated publishes a failed check carrying only the error.
    """

    def __init__(
        self,
        client: GitHubClient | None = None,
        policy_loader: PolicyLoader | None = None,
        review_config: ReviewConfig | None = None,
    ) -> None:
        self.github_client = client or github_client
        self.policy_loader = policy_loader or GitHubPolicyLoader(self.github_client)
        self.review_config = review_config or config.review

    def _fellows_api(self, installation_id: int) -> FellowsApi | None:
        if not self.review_config.fellows_roster_repo:
            return None
        return RosterFellowsApi(
            self.github_client,
            self.review_config.fellows_roster_repo,
            self.review_config.fellows_roster_path,
            installation_id,
        )

    def _elapsed_ms(self, start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    async def process(self, event: WebhookEvent) -> ProcessingResult:
        start_time = time.time()
        repo = event.repo_full_name
        installation_id = event.installation_id
        pr_data = event.pull_request
        log = logger.bind(repo=repo, pr_number=pr_data.get("number"), delivery_id=event.delivery_id)

        if not installation_id or not pr_data:
            log.error("review_run_rejected", reason="missing installation or pull request")
            return ProcessingResult(
                state=ProcessingState.ERROR,
                processing_time_ms=self._elapsed_ms(start_time),
                error="No installation ID or pull request in the event",
            )

        pull_request = GitHubPullRequestApi(self.github_client, repo, pr_data, installation_id)
        checks = CheckRunManager(
            self.github_client,
            repo,
            pull_request.head_sha,
            installation_id,
            name=self.review_config.check_run_name,
            details_url=pr_data.get("html_url"),
        )

        try:
            try:
                policy = await self.policy_loader.get_policy(repo, installation_id)
            except RulesFileNotFoundError as e:
                log.warning("review_policy_missing", error=str(e))
                await checks.publish_missing_config(config.repo_config.config_path)
                return ProcessingResult(
                    state=ProcessingState.NEUTRAL,
                    processing_time_ms=self._elapsed_ms(start_time),
                    error=str(e),
                )

            teams_org = self.review_config.teams_org or repo.split("/")[0]
            context = ReviewContext(
                pull_request,
                GitHubTeamsApi(self.github_client, teams_org, installation_id),
                fellows=self._fellows_api(installation_id),
                score_table=policy.score,
            )
            report = await ReviewPolicyEngine(context).evaluate(policy, log)

            if self.review_config.request_reviewers and not report.review_request.is_empty:
                await pull_request.request_review(report.review_request)

            await checks.publish_report(report)
            return ProcessingResult(
                state=ProcessingState.PASS if report.passed else ProcessingState.FAIL,
                reports=[rule_report.model_dump(mode="json") for rule_report in report.reports],
                lookups_made=context.cache.misses,
                processing_time_ms=self._elapsed_ms(start_time),
            )

        except Exception as e:
            log.error("review_run_failed", error=str(e), exc_info=True)
            try:
                await checks.publish_error(e)
            except Exception as publish_error:
                log.error("error_check_publish_failed", error=str(publish_error))
            return ProcessingResult(
                state=ProcessingState.ERROR,
                processing_time_ms=self._elapsed_ms(start_time),
                error=str(e),
            )
