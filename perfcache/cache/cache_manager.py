"""
In-memory performance cache with TTL expiry, glob invalidation and hit/miss stats.

Features:
- TTL-based entry expiration with lazy cleanup (injectable clock)
- Glob pattern-based key invalidation ("user:*", "*:profile", "*perm*")
- Thread-safe operations with RLock; producers run outside the lock
- Optional LRU ceiling (unbounded by default)
- Values isolated from callers by deep copy
"""

import copy
import fnmatch
import logging
import math
import re
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from ..config import CacheConfig

logger = logging.getLogger(__name__)

_MISSING = object()

TTL = int | float | timedelta


@dataclass
class CacheEntry:
    """Stored value plus its absolute expiry time."""

    value: Any
    expires_at: float
    created_at: float
    last_accessed: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class CacheStats:
    """Point-in-time snapshot of cache counters."""

    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    evictions: int = 0
    expired: int = 0
    current_size: int = 0
    hit_rate: float = 0.0

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    def to_dict(self) -> dict:
        """Convert to dict."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "sets": self.sets,
            "deletes": self.deletes,
            "evictions": self.evictions,
            "expired": self.expired,
            "current_size": self.current_size,
            "total_requests": self.total_requests,
            "hit_rate": self.hit_rate,
        }


def ttl_seconds(ttl: TTL) -> float:
    """Normalize a ttl given as seconds or timedelta."""
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    return float(ttl)


def escape_glob(text: str) -> str:
    """Quote *, ? and [ so text matches only itself inside a glob pattern."""
    return re.sub(r"([*?\[])", r"[\1]", str(text))


def compile_pattern(pattern: str) -> re.Pattern | None:
    """
    Compile a glob pattern into a case-sensitive regex.

    Returns None when the pattern cannot be compiled, so callers can treat it
    as matching nothing.
    """
    try:
        return re.compile(fnmatch.translate(pattern))
    except (re.error, TypeError) as e:
        logger.warning(f"Ignoring malformed cache pattern {pattern!r}: {e}")
        return None


class PerformanceCache:
    """Thread-safe in-memory key/value cache shared by request handlers."""

    def __init__(
        self,
        config: CacheConfig | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the cache.

        Args:
            config: Construction-time settings. Defaults to CacheConfig().
            clock: Returns the current time in seconds. Tests pass a fake.
        """
        self._config = config or CacheConfig()
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0
        self._evictions = 0
        self._expired = 0

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def default_ttl(self) -> float:
        return self._config.default_ttl

    def _isolate(self, value: Any) -> Any:
        if not self._config.copy_values:
            return value
        try:
            return copy.deepcopy(value)
        except (TypeError, copy.Error) as e:
            logger.debug(f"Caching {type(value).__name__} by reference, deepcopy failed: {e}")
            return value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get value from cache.

        Expired entries are removed on access and reported as misses.

        Args:
            key: Cache key
            default: Returned when the key is absent or expired

        Returns:
            Cached value or default
        """
        if not self.enabled:
            return default

        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return default

            now = self._clock()
            if entry.is_expired(now):
                del self._entries[key]
                self._expired += 1
                self._misses += 1
                return default

            entry.last_accessed = now
            # Move to end (most recently used)
            self._entries[key] = self._entries.pop(key)
            self._hits += 1
            return self._isolate(entry.value)

    def set(self, key: str, value: Any, ttl: TTL | None = None) -> bool:
        """
        Store value under key, replacing any existing entry.

        A ttl of zero or less (or NaN) expires the write immediately: the key is left
        absent, as if the entry had been stored and then aged out.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Seconds (or timedelta) to keep the value. None uses default_ttl.

        Returns:
            False when the cache is disabled, True otherwise
        """
        if not self.enabled:
            return False

        seconds = self.default_ttl if ttl is None else ttl_seconds(ttl)
        stored = self._isolate(value)

        with self._lock:
            self._sets += 1
            if math.isnan(seconds) or seconds <= 0:
                self._entries.pop(key, None)
                return True

            now = self._clock()
            # Re-insert so dict order tracks recency for LRU
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(
                value=stored,
                expires_at=now + seconds,
                created_at=now,
                last_accessed=now,
            )

            max_entries = self._config.max_entries
            if max_entries is not None:
                while len(self._entries) > max_entries:
                    self._evict_lru()
            return True

    def remember(self, key: str, producer: Callable[[], Any], ttl: TTL | None = None) -> Any:
        """
        Return the cached value, or compute, store and return it.

        The producer runs outside the lock, so a slow computation does not
        block other cache traffic. Two threads missing the same key at once
        may both run the producer; the last write wins.

        Args:
            key: Cache key
            producer: Zero-argument callable computing the value on a miss
            ttl: Seconds (or timedelta) to keep a computed value

        Returns:
            Cached or freshly computed value

        Raises:
            Whatever the producer raises. Nothing is cached in that case.
        """
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            return value

        value = producer()
        self.set(key, value, ttl)
        return value

    def delete(self, key: str) -> bool:
        """
        Delete specific key from cache.

        Args:
            key: Cache key to delete

        Returns:
            True if an entry was removed
        """
        with self._lock:
            if key not in self._entries:
                return False
            del self._entries[key]
            self._deletes += 1
            return True

    def clear_pattern(self, pattern: str) -> int:
        """
        Remove all keys matching a glob pattern.

        Examples:
            - "user:*" matches "user:1", "user:2"
            - "*:profile" matches "user:1:profile", "admin:profile"
            - "*perm*" matches "perm:1:can_use_pos", "user_perms:1"
            - "user:*:profile" matches "user:1:profile"

        A pattern without wildcards matches only the identical key. A pattern
        that cannot be compiled matches nothing.

        Args:
            pattern: Glob pattern to match

        Returns:
            Number of keys removed
        """
        matcher = compile_pattern(pattern)
        if matcher is None:
            return 0

        with self._lock:
            keys_to_delete = [key for key in self._entries if matcher.match(key)]
            for key in keys_to_delete:
                del self._entries[key]
            self._deletes += len(keys_to_delete)

        if keys_to_delete:
            logger.debug(f"Cleared {len(keys_to_delete)} cache keys matching {pattern!r}")
        return len(keys_to_delete)

    def clear(self) -> int:
        """Clear entire cache."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._deletes += count
            return count

    def cleanup_expired(self) -> int:
        """
        Remove all expired entries.

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self._clock()
            expired_keys = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired_keys:
                del self._entries[key]
            self._expired += len(expired_keys)

        if expired_keys:
            logger.debug(f"Cleaned up {len(expired_keys)} expired cache entries")
        return len(expired_keys)

    def get_stats(self) -> CacheStats:
        """
        Get cache statistics.

        current_size counts live entries only; expired entries still waiting
        for lazy removal are excluded.
        """
        with self._lock:
            now = self._clock()
            live = sum(1 for entry in self._entries.values() if not entry.is_expired(now))
            total_requests = self._hits + self._misses
            hit_rate = self._hits / total_requests if total_requests > 0 else 0.0

            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                sets=self._sets,
                deletes=self._deletes,
                evictions=self._evictions,
                expired=self._expired,
                current_size=live,
                hit_rate=hit_rate,
            )

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock())

    def _evict_lru(self) -> None:
        """
        Evict least-recently-used entry.

        Should only be called while holding the lock.
        """
        if not self._entries:
            return

        # Dict order tracks recency: the first key is the least recently used
        lru_key = next(iter(self._entries))
        del self._entries[lru_key]
        self._evictions += 1
        logger.debug(f"Evicted LRU key: {lru_key}")
