from src.rules.evaluators.and_distinct import AndDistinctRuleEvaluator
from src.rules.evaluators.base import BaseRuleEvaluator
from src.rules.evaluators.common import AndRuleEvaluator, BasicRuleEvaluator, OrRuleEvaluator
from src.rules.evaluators.fellows import FellowsRuleEvaluator

__all__ = [
    "AndDistinctRuleEvaluator",
    "AndRuleEvaluator",
    "BaseRuleEvaluator",
    "BasicRuleEvaluator",
    "FellowsRuleEvaluator",
    "OrRuleEvaluator",
]
