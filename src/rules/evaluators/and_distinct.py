"""Evaluator for 'and-distinct' rules.

Every requirement must be fulfilled, and one person's approval counts towards
one requirement only, even when that person qualifies for several of them.

Each requirement needing k approvals becomes k slots, each slot accepting any of
the requirement's candidates. The rule passes when the approvals can be assigned
one-to-one to the slots.
"""

from typing import Any

from src.rules.context import ReviewContext
from src.rules.evaluators.base import BaseRuleEvaluator
from src.rules.models import AndDistinctRule, RuleType
from src.rules.reports import RuleReport
from src.rules.reviewers import resolve_requirement
from src.rules.utils import intersection, unique, without

Slot = frozenset[str]


def expand_slots(groups: list[tuple[int, list[str]]]) -> list[Slot]:
    """One slot per required approval, holding the casefolded candidates of its requirement."""
    slots: list[Slot] = []
    for min_approvals, candidates in groups:
        slot = frozenset(login.casefold() for login in candidates)
        slots.extend([slot] * min_approvals)
    return slots


def rotation_assignment(approvals: list[str], slots: list[Slot]) -> bool:
    """Greedy search over every rotation of the approvals.

    Starting at each offset and wrapping around, every approval consumes the
    first remaining slot that accepts it. A rotation succeeds once every slot is
    consumed.
    """
    count = len(approvals)
    for offset in range(count):
        remaining = list(slots)
        for step in range(count):
            login = approvals[(offset + step) % count].casefold()
            for index, slot in enumerate(remaining):
                if login in slot:
                    del remaining[index]
                    break
            if not remaining:
                return True
    return False


def matching_assignment(approvals: list[str], slots: list[Slot]) -> bool:
    """Maximum bipartite matching between approvals and slots (augmenting paths)."""
    logins = [login.casefold() for login in approvals]
    slot_owner: list[int | None] = [None] * len(slots)

    def assign(approval: int, visited: set[int]) -> bool:
        for index, slot in enumerate(slots):
            if index in visited or logins[approval] not in slot:
                continue
            visited.add(index)
            owner = slot_owner[index]
            if owner is None or assign(owner, visited):
                slot_owner[index] = approval
                return True
        return False

    matched = sum(1 for approval in range(len(logins)) if assign(approval, set()))
    return matched == len(slots)


class AndDistinctRuleEvaluator(BaseRuleEvaluator):
    """Every requirement fulfilled by different users."""

    rule_type = RuleType.AND_DISTINCT
    description = (
        "Rule 'And Distinct' has many required reviewers/teams and requires all of them to be fulfilled "
        "**by different users**.\n\n"
        "The approval of one user that belongs to _two teams_ will count only towards one team."
    )

    async def evaluate(self, rule: AndDistinctRule, context: ReviewContext, log: Any) -> RuleReport | None:
        approvals = await context.approvals(rule.count_author)
        groups = [
            (requirement.min_approvals, await resolve_requirement(requirement, context, log))
            for requirement in rule.reviewers
        ]
        total = sum(min_approvals for min_approvals, _ in groups)

        if len(approvals) < total:
            log.warning(f"Not enough approvals. Need at least {total} and got {len(approvals)}")
            return self._failure(rule, context, approvals, groups, total)

        matches = [intersection(candidates, approvals) for _, candidates in groups]
        if any(not matched for matched in matches):
            log.warning("One of the groups does not have any approvals")
            return self._failure(rule, context, approvals, groups, total)

        if any(len(matched) < min_approvals for matched, (min_approvals, _) in zip(matches, groups)):
            log.warning("Not enough positive reviews to match a subcondition")
            return self._failure(rule, context, approvals, groups, total)

        slots = expand_slots(groups)
        if rotation_assignment(approvals, slots):
            log.debug("distinct_assignment_found", method="rotation")
            return None

        if matching_assignment(approvals, slots):
            log.info("distinct_assignment_found", method="matching")
            return None

        log.warning("Didn't find any matches to match all the rules requirements")
        return self._failure(rule, context, approvals, groups, total)

    def _failure(
        self,
        rule: AndDistinctRule,
        context: ReviewContext,
        approvals: list[str],
        groups: list[tuple[int, list[str]]],
        total: int,
    ) -> RuleReport:
        candidates = unique(*(group for _, group in groups))
        return RuleReport(
            rule_name=rule.name,
            rule_type=self.rule_type,
            missing_reviews=total,
            missing_users=without(candidates, [*approvals, context.author]),
            counting_reviews=intersection(approvals, candidates),
            users_to_request=unique(*(requirement.users for requirement in rule.reviewers)),
            teams_to_request=unique(*(requirement.teams for requirement in rule.reviewers)),
        )
