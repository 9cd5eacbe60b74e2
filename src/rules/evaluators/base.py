"""Base rule evaluator interface.

Every rule kind has one evaluator. An evaluator returns None when the rule is
fulfilled and a RuleReport explaining what is missing when it is not. Unmet
requirements are never raised; exceptions are reserved for policies that cannot
be evaluated at all.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from src.rules.context import ReviewContext
from src.rules.models import ReviewerRequirement, RuleType
from src.rules.reports import RuleReport
from src.rules.reviewers import resolve_requirement
from src.rules.utils import intersection, without


@dataclass
class RequirementOutcome:
    """How far a single reviewer requirement is from being fulfilled."""

    requirement: ReviewerRequirement
    candidates: list[str]
    counting_reviews: list[str]
    missing_reviews: int
    missing_users: list[str]

    @property
    def passed(self) -> bool:
        return self.missing_reviews == 0


async def evaluate_requirement(
    requirement: ReviewerRequirement,
    context: ReviewContext,
    approvals: list[str],
    log: Any,
) -> RequirementOutcome:
    """Count the approvals of a requirement's candidates.

    The pull request author never appears among the missing users: they cannot
    be asked to review their own pull request.
    """
    candidates = await resolve_requirement(requirement, context, log)
    counting = intersection(candidates, approvals)
    missing_reviews = max(0, requirement.min_approvals - len(counting))
    missing_users = without(candidates, [*approvals, context.author])
    log.debug(
        "requirement_evaluated",
        min_approvals=requirement.min_approvals,
        counting_reviews=counting,
        missing_reviews=missing_reviews,
    )
    return RequirementOutcome(
        requirement=requirement,
        candidates=candidates,
        counting_reviews=counting,
        missing_reviews=missing_reviews,
        missing_users=missing_users,
    )


class BaseRuleEvaluator(ABC):
    """Abstract base class for all rule evaluators.

    Attributes:
        rule_type: The rule kind this evaluator handles.
        description: Human-readable explanation of the rule kind, shown in reports.
    """

    rule_type: RuleType
    description: str = ""

    @abstractmethod
    async def evaluate(self, rule: Any, context: ReviewContext, log: Any) -> RuleReport | None:
        """Evaluate a rule against the pull request.

        Args:
            rule: The rule, of the kind matching rule_type.
            context: Memoized inputs of the run.
            log: Logger bound to the rule being evaluated.

        Returns:
            None if the rule is fulfilled, otherwise the report of what is missing.
        """
        pass
