"""Memoization of rule set evaluation, keyed by rule set identity and context."""
import functools
import logging
import threading
import weakref
from typing import Any, Callable, Dict, Optional, TypeVar

from pydantic import BaseModel, Field

from ..config import get_settings
from ..rules.evaluator import resolve
from ..rules.ruleset import RuleSet
from .cache_key import generate_context_key

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheStats(BaseModel):
    """Snapshot of evaluation cache counters."""

    rule_sets: int = Field(..., description="Rule sets with a live sub-cache")
    entries: int = Field(..., description="Cached results across all rule sets")
    hits: int = Field(default=0, description="Lookups answered from the cache")
    misses: int = Field(default=0, description="Lookups that ran the evaluator")


class _RuleSetCache:
    """Results cached for one rule set, guarded by its own lock."""

    __slots__ = ("lock", "values")

    def __init__(self):
        # re-entrant: a value factory may resolve against the same rule set
        self.lock = threading.RLock()
        self.values: Dict[str, Any] = {}


class EvaluationCache:
    """
    Thread-safe two-level cache: rule set -> context key -> resolved value.

    Rule sets are held through weak references, so caching a result never
    keeps a rule set alive; its sub-cache disappears when it is collected.
    Each rule set has its own lock held across check/compute/store, so a
    given (rule set, key) is computed at most once even under contention.

    Failures are never cached: if compute raises, nothing is stored.

    Example:
        >>> cache = EvaluationCache()
        >>> cache.get_or_compute(rules, '{"x":5}', lambda: resolve({"x": 5}, rules))
        'positive'
        >>> cache.size()
        1
    """

    def __init__(self):
        self._rule_sets: "weakref.WeakKeyDictionary[RuleSet, _RuleSetCache]" = weakref.WeakKeyDictionary()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def _bucket(self, rule_set: RuleSet) -> _RuleSetCache:
        with self._lock:
            bucket = self._rule_sets.get(rule_set)
            if bucket is None:
                bucket = _RuleSetCache()
                self._rule_sets[rule_set] = bucket
            return bucket

    def get_or_compute(self, rule_set: RuleSet, key: str, compute: Callable[[], T]) -> T:
        """
        Return the cached value for (rule_set, key), computing it on a miss.

        Args:
            rule_set: Rule set the value belongs to
            key: Serialized context
            compute: Zero-argument callable producing the value

        Returns:
            Cached or freshly computed value (None is a valid cached value)

        Thread-safe.
        """
        bucket = self._bucket(rule_set)
        with bucket.lock:
            if key in bucket.values:
                with self._lock:
                    self._hits += 1
                logger.debug(f"Cache hit for {rule_set!r} key={key}")
                return bucket.values[key]

            with self._lock:
                self._misses += 1
            logger.debug(f"Cache miss for {rule_set!r} key={key}")
            value = compute()
            bucket.values[key] = value
            return value

    def contains(self, rule_set: RuleSet, key: str) -> bool:
        with self._lock:
            bucket = self._rule_sets.get(rule_set)
        if bucket is None:
            return False
        with bucket.lock:
            return key in bucket.values

    def invalidate(self, rule_set: RuleSet) -> int:
        """
        Drop every cached result for one rule set.

        Use after mutating a rule set that has already been evaluated.

        Returns:
            Number of entries removed

        Thread-safe.
        """
        with self._lock:
            bucket = self._rule_sets.pop(rule_set, None)
        if bucket is None:
            return 0
        with bucket.lock:
            count = len(bucket.values)
        logger.info(f"Invalidated {count} cached results for {rule_set!r}")
        return count

    def clear_all(self) -> int:
        """
        Clear all cache entries and reset counters.

        Returns:
            Number of entries removed

        Thread-safe.
        """
        with self._lock:
            buckets = list(self._rule_sets.values())
            self._rule_sets.clear()
            self._hits = 0
            self._misses = 0
        count = sum(len(bucket.values) for bucket in buckets)
        logger.info(f"Cleared evaluation cache ({count} entries)")
        return count

    def size(self) -> int:
        """Number of cached results across all live rule sets."""
        with self._lock:
            buckets = list(self._rule_sets.values())
        return sum(len(bucket.values) for bucket in buckets)

    def stats(self) -> CacheStats:
        """
        Get cache statistics.

        Example:
            >>> stats = cache.stats()
            >>> print(f"Cache: {stats.entries} results for {stats.rule_sets} rule sets")
            Cache: 5 results for 2 rule sets
        """
        with self._lock:
            buckets = list(self._rule_sets.values())
            hits, misses = self._hits, self._misses
        return CacheStats(
            rule_sets=len(buckets),
            entries=sum(len(bucket.values) for bucket in buckets),
            hits=hits,
            misses=misses,
        )


def memoize(
    resolve_fn: Callable[[Any, RuleSet], T],
    cache: Optional[EvaluationCache] = None,
) -> Callable[[Any, RuleSet], T]:
    """
    Wrap an evaluator with an EvaluationCache.

    The wrapper has the evaluator's signature. Results are keyed by rule set
    identity and the serialized context; contexts that cannot be serialized
    are evaluated without caching. Exceptions are never cached.

    Args:
        resolve_fn: Function taking (context, rule_set)
        cache: Cache to use (default: a new private EvaluationCache)

    Returns:
        Memoized function exposing ``.cache`` and ``.__wrapped__``
    """
    if cache is None:
        cache = EvaluationCache()

    @functools.wraps(resolve_fn)
    def cached_resolve(context: Any, rule_set: RuleSet) -> T:
        if not get_settings().cache_enabled:
            return resolve_fn(context, rule_set)
        try:
            key = generate_context_key(context)
        except (TypeError, ValueError) as e:
            logger.debug(f"Context for {rule_set!r} has no cache key, evaluating uncached: {e}")
            return resolve_fn(context, rule_set)
        return cache.get_or_compute(rule_set, key, lambda: resolve_fn(context, rule_set))

    cached_resolve.cache = cache
    return cached_resolve


# Primary entry point: memoized first-match resolution.
apply_rules = memoize(resolve)
