"""
Review policy engine.

Runs every rule of a policy against one pull request. For each rule the modified
files are filtered by the rule condition; a rule with no matching file, or whose
exemption list contains the author, is skipped. Otherwise the evaluator of the
rule kind runs and its report, if any, is collected.
"""

from typing import Any

import structlog

from src.core.errors import RuleEvaluationError
from src.core.utils.logging import log_operation
from src.rules.aggregator import aggregate_reports
from src.rules.conditions import files_matching_condition
from src.rules.context import ReviewContext
from src.rules.models import BaseRule, ReviewPolicy
from src.rules.registry import EvaluatorRegistry
from src.rules.reports import PullRequestReport, RuleReport
from src.rules.reviewers import resolve_group
from src.rules.utils import intersection

logger = structlog.get_logger()


class ReviewPolicyEngine:
    """Evaluates a review policy against the pull request behind a ReviewContext."""

    def __init__(self, context: ReviewContext):
        self.context = context

    async def evaluate(self, policy: ReviewPolicy, log: Any = None) -> PullRequestReport:
        """
        Evaluate every rule of the policy, in declaration order.

        Returns:
            The pull request report; it lists only the failing rules.

        Raises:
            RuleEvaluationError: If a rule cannot be evaluated. No partial
                report is produced.
        """
        log = log or logger
        async with log_operation("policy_evaluation", log=log, rules=len(policy.rules)):
            modified_files = await self.context.modified_files()
            reports: list[RuleReport] = []
            for rule in policy.rules:
                rule_log = log.bind(rule=rule.name, rule_type=rule.type)
                try:
                    report = await self.evaluate_rule(rule, modified_files, rule_log)
                except RuleEvaluationError:
                    raise
                except Exception as e:
                    rule_log.error("rule_evaluation_failed", error=str(e))
                    raise RuleEvaluationError(rule.name, e) from e
                if report is not None:
                    reports.append(report)

            approvals = await self.context.approvals(False) if reports else []
            result = aggregate_reports(
                modified_files,
                reports,
                prevent=policy.prevent_review_requests,
                author=self.context.author,
                approvals=approvals,
            )
            log.info(
                "policy_evaluated",
                conclusion=result.conclusion,
                failed_rules=[report.rule_name for report in reports],
                users_to_request=result.review_request.users,
                teams_to_request=result.review_request.teams,
            )
            return result

    async def evaluate_rule(self, rule: BaseRule, modified_files: list[str], log: Any) -> RuleReport | None:
        """Evaluate a single rule. None when it passed or was skipped."""
        matching = files_matching_condition(modified_files, rule.condition)
        if not matching:
            log.debug("rule_skipped", reason="no_matching_files")
            return None
        log.debug("rule_files_matched", files=matching)

        if await self._author_may_skip(rule, log):
            log.info("rule_skipped", reason="author_allowed_to_skip", author=self.context.author)
            return None

        evaluator = EvaluatorRegistry.get_evaluator(rule.type)
        report = await evaluator.evaluate(rule, self.context, log)
        if report is None:
            log.info("rule_passed")
        else:
            log.info("rule_failed", missing_reviews=report.missing_reviews)
        return report

    async def _author_may_skip(self, rule: BaseRule, log: Any) -> bool:
        exemption = rule.allowed_to_skip_rule
        if exemption is None or exemption.is_empty:
            return False
        members = await resolve_group(exemption, self.context, log)
        return bool(intersection([self.context.author], members))
