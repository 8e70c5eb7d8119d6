"""Predicates written as expression strings, evaluated safely with simpleeval."""
import re
from collections.abc import Mapping
from dataclasses import asdict, is_dataclass
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel
from simpleeval import FeatureNotAvailable, NameNotDefined, SimpleEval

from .errors import ExpressionError

DEFAULT_FUNCTIONS: Dict[str, Callable] = {
    "len": len,
    "min": min,
    "max": max,
    "abs": abs,
    "round": round,
}

_KEYWORDS = {"and", "or", "not", "in", "is", "if", "else", "True", "False", "None"}
_NAME_PATTERN = re.compile(r"\b([a-zA-Z_][a-zA-Z0-9_]*)\b")
_STRING_LITERAL = re.compile(r"'[^']*'|\"[^\"]*\"")


def _context_names(context: Any) -> Dict[str, Any]:
    if isinstance(context, Mapping):
        return dict(context)
    if isinstance(context, BaseModel):
        return context.model_dump()
    if is_dataclass(context) and not isinstance(context, type):
        return asdict(context)
    raise ExpressionError(
        f"Expression predicates need a mapping context, got {type(context).__name__}"
    )


class ExpressionPredicate:
    """
    Predicate built from an expression string instead of a function.

    The expression is evaluated in a sandbox without access to Python
    internals, with the context's keys as names.

    Supported operations:
    - Comparisons: <, >, <=, >=, ==, !=
    - Logical: and, or, not
    - Arithmetic: +, -, *, /, %, **
    - Membership: in, not in
    - Subscripts: user["post_count"]

    Each instance is a distinct rule key in a RuleSet, even if two instances
    share the same expression text.

    Example:
        >>> is_power_user = ExpressionPredicate("post_count > 100")
        >>> is_power_user({"post_count": 101})
        True
    """

    def __init__(self, expression: str, functions: Optional[Dict[str, Callable]] = None):
        if not expression or not expression.strip():
            raise ExpressionError("Expression cannot be empty", expression)
        self.expression = expression.strip()
        self.functions = dict(DEFAULT_FUNCTIONS)
        if functions:
            self.functions.update(functions)
        self._validate()

    def _validate(self) -> None:
        try:
            # no names bound: an unknown name only proves the syntax parsed
            SimpleEval(names={}, functions=self.functions).eval(self.expression)
        except (NameNotDefined, FeatureNotAvailable):
            return
        except SyntaxError as e:
            raise ExpressionError(f"Invalid expression syntax: {e}", self.expression) from e
        except Exception as e:
            raise ExpressionError(
                f"Invalid expression: {type(e).__name__}: {e}", self.expression
            ) from e

    def __call__(self, context: Any) -> bool:
        """
        Evaluate the expression against a context.

        Raises:
            ExpressionError: If the context is not a mapping or lacks a referenced name
        """
        names = _context_names(context)
        try:
            result = SimpleEval(names=names, functions=self.functions).eval(self.expression)
        except NameNotDefined as e:
            missing = getattr(e, "name", "unknown")
            raise ExpressionError(
                f"Name '{missing}' not available in context. Available: {sorted(names)}",
                self.expression,
            ) from e
        return bool(result)

    def required_names(self) -> List[str]:
        """
        Names referenced by the expression, excluding keywords and functions.

        Example:
            >>> ExpressionPredicate("kyc_score < 50 and transaction_count > 0").required_names()
            ['kyc_score', 'transaction_count']
        """
        stripped = _STRING_LITERAL.sub("", self.expression)
        found = set(_NAME_PATTERN.findall(stripped))
        return sorted(found - _KEYWORDS - set(self.functions))

    def __repr__(self) -> str:
        return f"ExpressionPredicate({self.expression!r})"


def when(expression: str, **functions: Callable) -> ExpressionPredicate:
    """Shorthand for ExpressionPredicate, reads well inside add_rule()."""
    return ExpressionPredicate(expression, functions or None)
