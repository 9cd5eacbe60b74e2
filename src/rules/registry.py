"""
Registry for rule evaluators.

This module maps each RuleType to the evaluator that implements it, so the
engine dispatches on the rule's `type` tag without knowing the rule kinds.
"""

from src.core.errors import UnknownRuleTypeError
from src.rules.evaluators import (
    AndDistinctRuleEvaluator,
    AndRuleEvaluator,
    BasicRuleEvaluator,
    FellowsRuleEvaluator,
    OrRuleEvaluator,
)
from src.rules.evaluators.base import BaseRuleEvaluator
from src.rules.models import RuleType

# Map RuleType to evaluator instances (evaluators are stateless)
RULE_TYPE_TO_EVALUATOR: dict[RuleType, BaseRuleEvaluator] = {
    RuleType.BASIC: BasicRuleEvaluator(),
    RuleType.AND: AndRuleEvaluator(),
    RuleType.OR: OrRuleEvaluator(),
    RuleType.AND_DISTINCT: AndDistinctRuleEvaluator(),
    RuleType.FELLOWS: FellowsRuleEvaluator(),
}


class EvaluatorRegistry:
    """Registry for looking up rule evaluators."""

    @staticmethod
    def get_evaluator(rule_type: RuleType | str) -> BaseRuleEvaluator:
        """
        Get the evaluator for a rule kind.

        Raises:
            UnknownRuleTypeError: If no evaluator handles the rule kind.
        """
        try:
            return RULE_TYPE_TO_EVALUATOR[RuleType(rule_type)]
        except (KeyError, ValueError) as e:
            raise UnknownRuleTypeError(f"Rule type '{rule_type}' is not supported") from e

    @staticmethod
    def describe(rule_type: RuleType | str) -> str:
        """Human-readable explanation of a rule kind, empty if unknown."""
        try:
            return RULE_TYPE_TO_EVALUATOR[RuleType(rule_type)].description
        except (KeyError, ValueError):
            return ""
