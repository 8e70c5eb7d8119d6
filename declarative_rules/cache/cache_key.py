"""Cache key generation logic."""
import json
from dataclasses import fields, is_dataclass
from typing import Any, Set

from pydantic import BaseModel

_SCALAR_TYPES = (str, int, float, bool, type(None))
_TYPE_TAG = "__type__"
_TUPLE_TAG = "__tuple__"


def _qualified_name(value: Any) -> str:
    cls = type(value)
    return f"{cls.__module__}.{cls.__qualname__}"


def _escape(key: str) -> str:
    # user keys never start with "__" after escaping, so tags cannot collide
    return "_" + key if key.startswith("__") else key


def _normalize(value: Any, active: Set[int]) -> Any:
    """
    Convert a context into a JSON tree whose form differs whenever the
    original values are not equal.

    Raises:
        TypeError: Unsupported value, subclassed scalar or non-str mapping key
        ValueError: Circular reference
    """
    if type(value) in _SCALAR_TYPES:
        return value

    marker = id(value)
    if marker in active:
        raise ValueError("Circular reference detected")
    active.add(marker)
    try:
        if isinstance(value, dict):
            normalized = {}
            for key, item in value.items():
                if type(key) is not str:
                    raise TypeError(f"Mapping key {key!r} is not a str")
                normalized[_escape(key)] = _normalize(item, active)
            return normalized
        if isinstance(value, list):
            return [_normalize(item, active) for item in value]
        if isinstance(value, tuple):
            return {_TUPLE_TAG: [_normalize(item, active) for item in value]}
        if isinstance(value, BaseModel):
            return {_TYPE_TAG: _qualified_name(value), "fields": _normalize(value.model_dump(mode="json"), active)}
        if is_dataclass(value) and not isinstance(value, type):
            return {
                _TYPE_TAG: _qualified_name(value),
                "fields": {f.name: _normalize(getattr(value, f.name), active) for f in fields(value)},
            }
    finally:
        active.discard(marker)
    raise TypeError(f"Object of type {type(value).__name__} cannot be used in a context key")


def generate_context_key(context: Any) -> str:
    """
    Generate a cache key for an evaluation context.

    The key is the compact JSON form of the context. Mapping keys are kept
    in their insertion order, so two dicts holding the same items in a
    different order can produce different keys. Tuples, dataclasses and
    pydantic models are tagged with their type, so they never share a key
    with a list or a plain dict.

    Args:
        context: JSON-compatible value (str-keyed dicts), tuple, pydantic model or dataclass

    Returns:
        Cache key string

    Raises:
        TypeError: If the context contains a value with no key form, including
            dicts with non-str keys
        ValueError: If the context contains a circular reference

    Example:
        >>> generate_context_key({"x": 5, "tags": ["a", "b"]})
        '{"x":5,"tags":["a","b"]}'
    """
    return json.dumps(_normalize(context, set()), separators=(",", ":"))
