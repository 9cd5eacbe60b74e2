"""Evaluator for 'fellows' rules.

Qualifying reviewers come from the rank registry rather than from teams: every
fellow of `min_rank` or above. The approval count is checked like a basic rule.
When `min_total_score` is set, the approvals must also add up to that score,
each approving fellow contributing the score of their rank.
"""

from typing import Any

from src.core.errors import EmptyRequirementError
from src.rules.context import ReviewContext
from src.rules.evaluators.base import BaseRuleEvaluator
from src.rules.models import FellowsRule, RankScoreTable, RuleType
from src.rules.reports import MissingRankReport, MissingScoreReport, RuleReport
from src.rules.reviewers import ensure_pool
from src.rules.utils import intersection, same_login, without


def fellow_scores(fellows: list[tuple[str, int]], table: RankScoreTable) -> dict[str, int]:
    """Score of every fellow, keyed by login in registry order."""
    return {login: table.score_for(rank) for login, rank in fellows}


def approvals_needed(scores: list[int], missing_score: int) -> int:
    """Fewest extra approvals, taking the highest scores first, that cover the missing score."""
    total = 0
    for needed, score in enumerate(sorted(scores, reverse=True), start=1):
        total += score
        if total >= missing_score:
            return needed
    return 0


class FellowsRuleEvaluator(BaseRuleEvaluator):
    """Approvals from fellows of a minimum rank, optionally weighted by score."""

    rule_type = RuleType.FELLOWS
    description = (
        "Rule 'Fellows' requires a given amount of reviews from users whose Fellowship ranking "
        "is the required rank or great."
    )

    async def evaluate(self, rule: FellowsRule, context: ReviewContext, log: Any) -> RuleReport | None:
        members = await context.rank_members(rule.min_rank)
        if not members:
            raise EmptyRequirementError(f"No users have been found with the rank {rule.min_rank} or above")
        ensure_pool(rule.min_approvals, members, source=f"rank {rule.min_rank} or above")

        approvals = await context.approvals(rule.count_author)
        counting = intersection(members, approvals)
        missing_reviews = rule.min_approvals - len(counting)
        if missing_reviews > 0:
            log.info("rule_missing_reviews", missing_reviews=missing_reviews, min_rank=rule.min_rank)
            return MissingRankReport(
                rule_name=rule.name,
                rule_type=self.rule_type,
                missing_reviews=missing_reviews,
                missing_users=without(members, [*approvals, context.author]),
                counting_reviews=counting,
                missing_rank=rule.min_rank,
            )

        if rule.min_total_score is None:
            return None
        return await self._evaluate_score(rule, context, approvals, log)

    async def _evaluate_score(
        self, rule: FellowsRule, context: ReviewContext, approvals: list[str], log: Any
    ) -> RuleReport | None:
        required_score = rule.min_total_score or 0
        scores = fellow_scores(await context.fellows_ranks(), context.score_table)

        current_score = 0
        counting: list[str] = []
        candidates: dict[str, int] = {}
        for login, score in scores.items():
            if score == 0:
                continue
            if any(same_login(login, approver) for approver in approvals):
                current_score += score
                counting.append(login)
            elif not same_login(login, context.author):
                candidates[login] = score

        log.debug("fellows_score_computed", current_score=current_score, required_score=required_score)
        if current_score >= required_score:
            return None

        missing_reviews = approvals_needed(list(candidates.values()), required_score - current_score)
        if missing_reviews == 0:
            # Not even every remaining fellow approving closes the gap
            log.warning(
                "required_score_unreachable",
                required_score=required_score,
                reachable_score=current_score + sum(candidates.values()),
            )
            missing_reviews = max(len(candidates), 1)

        log.info(
            "rule_missing_score",
            current_score=current_score,
            required_score=required_score,
            missing_reviews=missing_reviews,
        )
        return MissingScoreReport(
            rule_name=rule.name,
            rule_type=self.rule_type,
            missing_reviews=missing_reviews,
            missing_users=list(candidates),
            counting_reviews=counting,
            current_score=current_score,
            required_score=required_score,
            user_scores=candidates,
        )
