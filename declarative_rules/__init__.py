"""
declarative-rules: first-match predicate dispatch.

Build a RuleSet of (predicate, value) pairs with an optional default, then
resolve contexts against it with apply_rules (memoized) or resolve (fresh
evaluation every call).

    >>> from declarative_rules import RuleSet, apply_rules
    >>> roles = (
    ...     RuleSet()
    ...     .add_rule(lambda ctx: ctx["user"]["username"] == "admin", "Administrator")
    ...     .add_rule(lambda ctx: ctx["user"]["is_moderator"], "Moderator")
    ...     .set_default("Member")
    ... )
    >>> apply_rules({"user": {"username": "jane", "is_moderator": False}}, roles)
    'Member'
"""
from .cache import CacheStats, EvaluationCache, apply_rules, generate_context_key, memoize
from .config import Settings, get_settings, reload_settings
from .rules import (
    ExpressionError,
    ExpressionPredicate,
    InvalidRuleError,
    NoMatchError,
    Predicate,
    Rules,
    RuleSet,
    RulesError,
    resolve,
    when,
)

__version__ = "1.0.0"

__all__ = [
    "CacheStats",
    "EvaluationCache",
    "ExpressionError",
    "ExpressionPredicate",
    "InvalidRuleError",
    "NoMatchError",
    "Predicate",
    "RuleSet",
    "Rules",
    "RulesError",
    "Settings",
    "apply_rules",
    "generate_context_key",
    "get_settings",
    "memoize",
    "reload_settings",
    "resolve",
    "when",
]
