"""Exceptions raised while building and evaluating rule sets."""
from typing import Any, Optional


class RulesError(Exception):
    """Base class for all declarative-rules errors."""
    pass


class InvalidRuleError(RulesError, TypeError):
    """Raised when a rule condition is not a callable predicate."""

    def __init__(self, message: str = "Rule condition must be a function.", condition: Any = None):
        super().__init__(message)
        self.condition = condition


class ExpressionError(InvalidRuleError):
    """Raised when an expression predicate is malformed or cannot be evaluated."""

    def __init__(self, message: str, expression: Optional[str] = None):
        super().__init__(message, condition=expression)
        self.expression = expression


class NoMatchError(RulesError, LookupError):
    """
    Raised when no predicate matched and the rule set has no default.

    Attributes:
        rule_set: The rule set that failed to resolve
    """

    def __init__(self, rule_set: Any = None, message: Optional[str] = None):
        if message is None:
            message = "Rule set is missing a default and no conditions were met."
            if rule_set is not None:
                message = f"{message} ({rule_set!r})"
        super().__init__(message)
        self.rule_set = rule_set
