"""Evaluation cache keyed by rule set identity and serialized context."""
from .cache_key import generate_context_key
from .memo_cache import CacheStats, EvaluationCache, apply_rules, memoize

__all__ = ["CacheStats", "EvaluationCache", "apply_rules", "generate_context_key", "memoize"]
