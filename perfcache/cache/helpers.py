"""
Free-function access to the shared performance cache.

Thin forwards to the cache held by the application context, for callers that
have no cache instance injected.
"""

from collections.abc import Callable
from typing import Any

from .app_context import get_cache
from .cache_manager import TTL


def cache_get(key: str, default: Any = None) -> Any:
    return get_cache().get(key, default)


def cache_set(key: str, value: Any, ttl: TTL | None = None) -> bool:
    return get_cache().set(key, value, ttl)


def cache_remember(key: str, producer: Callable[[], Any], ttl: TTL | None = None) -> Any:
    return get_cache().remember(key, producer, ttl)


def cache_delete(key: str) -> bool:
    return get_cache().delete(key)


def cache_clear_pattern(pattern: str) -> int:
    """Remove every key matching a glob pattern; returns the count removed."""
    return get_cache().clear_pattern(pattern)


def cache_stats() -> dict:
    """Snapshot of hits, misses, sets, deletes, current_size and hit_rate."""
    return get_cache().get_stats().to_dict()
