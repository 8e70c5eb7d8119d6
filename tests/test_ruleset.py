"""Unit tests for the RuleSet builder."""
import pytest
from declarative_rules import InvalidRuleError, Rules, RuleSet, apply_rules, resolve


def is_positive(ctx):
    return ctx["x"] > 0


def is_even(ctx):
    return ctx["x"] % 2 == 0


class TestRuleSetBuilder:
    """Test fluent rule set construction."""

    def test_add_rule_returns_same_instance(self):
        """Test that add_rule and set_default support chaining."""
        rules = RuleSet()
        assert rules.add_rule(is_positive, "positive") is rules
        assert rules.set_default("other") is rules

    def test_entries_keep_insertion_order(self):
        """Test that entries come back in the order they were added."""
        rules = RuleSet().add_rule(is_positive, "positive").add_rule(is_even, "even")
        assert rules.entries() == ((is_positive, "positive"), (is_even, "even"))

    def test_set_rule_alias(self):
        """Test that set_rule behaves like add_rule."""
        rules = RuleSet().set_rule(is_positive, "positive")
        assert rules.entries() == ((is_positive, "positive"),)

    def test_rules_alias(self):
        """Test that Rules is the same class as RuleSet."""
        assert Rules is RuleSet

    def test_len_iter_contains(self):
        """Test container helpers."""
        rules = RuleSet().add_rule(is_positive, "positive")
        assert len(rules) == 1
        assert list(rules) == [(is_positive, "positive")]
        assert is_positive in rules
        assert is_even not in rules

    def test_repr_includes_name(self):
        """Test that repr identifies the rule set for diagnostics."""
        rules = RuleSet("sizes").add_rule(is_positive, "positive")
        assert repr(rules) == "<RuleSet 'sizes': 1 rules, no default>"


class TestRuleSetIdentityKeys:
    """Test that predicates are keyed by identity."""

    def test_readding_predicate_replaces_value_in_place(self):
        """Test last write wins and the original position is kept."""
        rules = (
            RuleSet()
            .add_rule(is_positive, "positive")
            .add_rule(is_even, "even")
            .add_rule(is_positive, "strictly positive")
        )
        assert len(rules) == 2
        assert rules.entries() == ((is_positive, "strictly positive"), (is_even, "even"))
        # still first in order, so it wins over is_even for x=4
        assert resolve({"x": 4}, rules) == "strictly positive"
        assert apply_rules({"x": 4}, rules) == "strictly positive"

    def test_readding_after_evaluation_updates_result(self):
        """Test that re-adding a predicate changes what later evaluations return."""
        rules = RuleSet().add_rule(is_positive, "positive")
        assert resolve({"x": 1}, rules) == "positive"

        rules.add_rule(is_positive, "updated")
        assert resolve({"x": 1}, rules) == "updated"
        assert len(rules) == 1

    def test_equal_but_distinct_predicates_are_separate_rules(self):
        """Test that two equal-looking lambdas are two rules."""
        first = lambda ctx: True  # noqa: E731
        second = lambda ctx: True  # noqa: E731
        rules = RuleSet().add_rule(first, "a").add_rule(second, "b")
        assert len(rules) == 2

    def test_unhashable_callable_is_accepted(self):
        """Test that callables without __hash__ can still be rules."""

        class Threshold:
            __hash__ = None

            def __init__(self, limit):
                self.limit = limit

            def __eq__(self, other):
                return isinstance(other, Threshold) and other.limit == self.limit

            def __call__(self, ctx):
                return ctx["x"] > self.limit

        over_ten = Threshold(10)
        rules = RuleSet().add_rule(over_ten, "large").add_rule(Threshold(10), "also large")
        assert len(rules) == 2
        assert over_ten in rules


class TestRuleSetValidation:
    """Test rejection of invalid conditions."""

    def test_non_callable_condition_raises(self):
        """Test that a string condition is rejected."""
        rules = RuleSet()
        with pytest.raises(InvalidRuleError, match="Rule condition must be a function."):
            rules.add_rule("not-a-function", "invalid")

    def test_non_callable_condition_does_not_mutate(self):
        """Test that a failed add_rule leaves the rule set untouched."""
        rules = RuleSet().add_rule(is_positive, "positive")
        with pytest.raises(InvalidRuleError):
            rules.add_rule(None, "invalid")
        assert rules.entries() == ((is_positive, "positive"),)

    def test_invalid_rule_error_is_type_error(self):
        """Test that InvalidRuleError can be caught as TypeError."""
        with pytest.raises(TypeError):
            RuleSet().add_rule(42, "invalid")


class TestRuleSetDefault:
    """Test default value handling."""

    def test_no_default_by_default(self):
        """Test that a new rule set has no default."""
        rules = RuleSet()
        assert rules.has_default is False
        with pytest.raises(LookupError):
            rules.default_value()

    def test_none_default_is_present(self):
        """Test that None is a real default, not 'unset'."""
        rules = RuleSet().set_default(None)
        assert rules.has_default is True
        assert rules.default_value() is None

    def test_set_default_replaces_previous(self):
        """Test that only the latest default is kept."""
        rules = RuleSet().set_default("first").set_default("second")
        assert rules.default_value() == "second"

    def test_clear_default(self):
        """Test removing a default."""
        rules = RuleSet().set_default(0).clear_default()
        assert rules.has_default is False
