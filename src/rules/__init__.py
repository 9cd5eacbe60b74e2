# Rules package

from src.rules.models import (
    AndDistinctRule,
    AndRule,
    BasicRule,
    FellowsRule,
    OrRule,
    RankScoreTable,
    ReviewerGroup,
    ReviewerRequirement,
    ReviewPolicy,
    Rule,
    RuleCondition,
    RuleType,
)
from src.rules.reports import (
    MissingRankReport,
    MissingScoreReport,
    PullRequestReport,
    ReviewRequest,
    RuleReport,
)

__all__ = [
    "AndDistinctRule",
    "AndRule",
    "BasicRule",
    "FellowsRule",
    "MissingRankReport",
    "MissingScoreReport",
    "OrRule",
    "PullRequestReport",
    "RankScoreTable",
    "ReviewPolicy",
    "ReviewRequest",
    "ReviewerGroup",
    "ReviewerRequirement",
    "Rule",
    "RuleCondition",
    "RuleReport",
    "RuleType",
]
