"""Rule sets and first-match evaluation."""
from .errors import ExpressionError, InvalidRuleError, NoMatchError, RulesError
from .evaluator import resolve
from .expressions import ExpressionPredicate, when
from .ruleset import Predicate, Rules, RuleSet

__all__ = [
    "ExpressionError",
    "ExpressionPredicate",
    "InvalidRuleError",
    "NoMatchError",
    "Predicate",
    "RuleSet",
    "Rules",
    "RulesError",
    "resolve",
    "when",
]
