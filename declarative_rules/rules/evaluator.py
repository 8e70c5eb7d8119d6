"""First-match evaluation of a rule set against a context."""
from typing import TypeVar

from .errors import NoMatchError
from .ruleset import RuleSet

T = TypeVar("T")
C = TypeVar("C")


def resolve(context: C, rule_set: RuleSet[T, C]) -> T:
    """
    Resolve a context against a rule set without caching.

    Predicates are tried in insertion order and the value of the first
    predicate returning a truthy result is returned; later predicates are
    not called. Exceptions raised by a predicate propagate unchanged.

    Args:
        context: Value passed to every predicate
        rule_set: Rules to evaluate (never mutated)

    Returns:
        The matched value, or the rule set's default if nothing matched

    Raises:
        NoMatchError: If nothing matched and the rule set has no default

    Example:
        >>> sizes = RuleSet().add_rule(lambda ctx: ctx["x"] > 10, "large")
        >>> resolve({"x": 11}, sizes)
        'large'
    """
    for condition, value in rule_set.entries():
        if condition(context):
            return value

    if rule_set.has_default:
        return rule_set.default_value()

    raise NoMatchError(rule_set)
