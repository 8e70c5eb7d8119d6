"""Ordered, identity-keyed container of (predicate, value) rules."""
from typing import Any, Callable, Dict, Generic, Iterator, Optional, Tuple, TypeVar

from .errors import InvalidRuleError

T = TypeVar("T")
C = TypeVar("C")

Predicate = Callable[[Any], bool]


class RuleSet(Generic[T, C]):
    """
    Declarative set of first-match rules with an optional default.

    Rules are keyed by predicate identity (``is``, not ``==``) and kept in
    insertion order. Re-adding a predicate that is already present replaces
    its value but keeps its original position.

    Build the rule set fully before sharing it across threads; mutation is
    not synchronized with evaluation.

    Example:
        >>> roles = (
        ...     RuleSet("roles")
        ...     .add_rule(lambda ctx: ctx["username"] == "admin", "Administrator")
        ...     .set_default("Member")
        ... )
        >>> roles
        <RuleSet 'roles': 1 rules, default>
    """

    def __init__(self, name: Optional[str] = None):
        self.name = name
        self._rules: Dict[int, Tuple[Callable[[C], bool], T]] = {}  # {id(predicate): (predicate, value)}
        self._default: Optional[T] = None
        self._has_default = False

    def add_rule(self, condition: Callable[[C], bool], value: T) -> "RuleSet[T, C]":
        """
        Add a predicate rule.

        Args:
            condition: Callable taking the context and returning a truthy result on match
            value: Value returned when the condition matches

        Returns:
            The same rule set, for chaining

        Raises:
            InvalidRuleError: If condition is not callable (the rule set is left unchanged)
        """
        if not callable(condition):
            raise InvalidRuleError(condition=condition)
        # dict assignment to an existing key keeps its slot
        self._rules[id(condition)] = (condition, value)
        return self

    # Historical name of add_rule.
    set_rule = add_rule

    def set_default(self, value: T) -> "RuleSet[T, C]":
        """Set the fallback value, replacing any previous default."""
        self._default = value
        self._has_default = True
        return self

    def clear_default(self) -> "RuleSet[T, C]":
        self._default = None
        self._has_default = False
        return self

    @property
    def has_default(self) -> bool:
        return self._has_default

    def default_value(self) -> T:
        """
        Get the fallback value.

        Raises:
            LookupError: If no default has been set. A default of None is a valid default.
        """
        if not self._has_default:
            raise LookupError("Rule set has no default value")
        return self._default

    def entries(self) -> Tuple[Tuple[Callable[[C], bool], T], ...]:
        """Snapshot of (predicate, value) pairs in evaluation order."""
        return tuple(self._rules.values())

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Tuple[Callable[[C], bool], T]]:
        return iter(self.entries())

    def __contains__(self, condition: Any) -> bool:
        entry = self._rules.get(id(condition))
        return entry is not None and entry[0] is condition

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        default = "default" if self._has_default else "no default"
        return f"<RuleSet{label}: {len(self._rules)} rules, {default}>"


# Alias kept for callers used to the shorter name.
Rules = RuleSet
