"""Evaluators for the rules built from users and teams: basic, and, or."""

import asyncio
from typing import Any

from src.rules.context import ReviewContext
from src.rules.evaluators.base import BaseRuleEvaluator, RequirementOutcome, evaluate_requirement
from src.rules.models import AndRule, BasicRule, BaseRule, OrRule, RuleType
from src.rules.reports import RuleReport
from src.rules.utils import unique


def failure_report(rule: BaseRule, outcomes: list[RequirementOutcome], missing_reviews: int) -> RuleReport:
    """Merge the failed requirements of a rule into one report."""
    return RuleReport(
        rule_name=rule.name,
        rule_type=RuleType(rule.type),
        missing_reviews=missing_reviews,
        missing_users=unique(*(o.missing_users for o in outcomes)),
        counting_reviews=unique(*(o.counting_reviews for o in outcomes)),
        users_to_request=unique(*(o.requirement.users for o in outcomes)),
        teams_to_request=unique(*(o.requirement.teams for o in outcomes)),
    )


class BasicRuleEvaluator(BaseRuleEvaluator):
    """A given amount of approvals from the listed users and teams."""

    rule_type = RuleType.BASIC
    description = "Rule 'Basic' requires a given amount of reviews from users/teams."

    async def evaluate(self, rule: BasicRule, context: ReviewContext, log: Any) -> RuleReport | None:
        approvals = await context.approvals(rule.count_author)
        outcome = await evaluate_requirement(rule.requirement, context, approvals, log)
        if outcome.passed:
            return None

        log.info("rule_missing_reviews", missing_reviews=outcome.missing_reviews)
        return failure_report(rule, [outcome], outcome.missing_reviews)


class AndRuleEvaluator(BaseRuleEvaluator):
    """Every requirement must be fulfilled."""

    rule_type = RuleType.AND
    description = "Rule 'And' has many required reviewers/teams and requires all of them to be fulfilled."

    async def evaluate(self, rule: AndRule, context: ReviewContext, log: Any) -> RuleReport | None:
        approvals = await context.approvals(rule.count_author)
        # Independent reads; the run cache serializes shared lookups
        outcomes = await asyncio.gather(
            *(evaluate_requirement(requirement, context, approvals, log) for requirement in rule.reviewers)
        )
        failed = [outcome for outcome in outcomes if not outcome.passed]
        if not failed:
            return None

        missing_reviews = sum(outcome.missing_reviews for outcome in failed)
        log.info("rule_missing_reviews", missing_reviews=missing_reviews, failed_requirements=len(failed))
        return failure_report(rule, failed, missing_reviews)


class OrRuleEvaluator(BaseRuleEvaluator):
    """At least one requirement must be fulfilled."""

    rule_type = RuleType.OR
    description = "Rule 'Or' has many required reviewers/teams and requires at least one of them to be fulfilled."

    async def evaluate(self, rule: OrRule, context: ReviewContext, log: Any) -> RuleReport | None:
        approvals = await context.approvals(rule.count_author)
        failed: list[RequirementOutcome] = []
        for position, requirement in enumerate(rule.reviewers):
            outcome = await evaluate_requirement(requirement, context, approvals, log)
            if outcome.passed:
                log.debug("requirement_fulfilled", position=position)
                return None
            failed.append(outcome)

        # The cheapest branch is what the rule is really missing
        missing_reviews = min(outcome.missing_reviews for outcome in failed)
        log.info("rule_missing_reviews", missing_reviews=missing_reviews)
        return failure_report(rule, failed, missing_reviews)
