"""
Caching decorators for functions.

Provides decorators to cache function results and invalidate cache on writes.
Supports both sync and async functions.
"""

import asyncio
import functools
import hashlib
import logging
from collections.abc import Callable
from typing import Any

from .app_context import get_cache
from .cache_manager import _MISSING, TTL, PerformanceCache

logger = logging.getLogger(__name__)

MAX_KEY_LENGTH = 256


def _generate_cache_key(func_name: str, args: tuple, kwargs: dict) -> str:
    """
    Generate a cache key from function name and arguments.

    Args:
        func_name: Function name
        args: Function arguments
        kwargs: Function keyword arguments

    Returns:
        Cache key
    """
    key_parts = [func_name]
    key_parts.extend(repr(arg) for arg in args)
    key_parts.extend(f"{k}={v!r}" for k, v in sorted(kwargs.items()))

    key_str = "|".join(key_parts)

    # Use hash if key is too long
    if len(key_str) > MAX_KEY_LENGTH:
        key_hash = hashlib.md5(key_str.encode()).hexdigest()  # nosec B324 # noqa: S324 - cache key, not crypto
        return f"{func_name}:{key_hash}"

    return f"{func_name}:{key_str}"


def cached(
    ttl: TTL | None = None,
    key_func: Callable[..., str] | None = None,
    cache: PerformanceCache | None = None,
) -> Callable:
    """
    Decorator to cache function results.

    Caches the return value of a function in the performance cache.
    Supports both sync and async functions. Exceptions raised by the
    function propagate and nothing is cached.

    Args:
        ttl: Time-to-live in seconds. None uses the cache's default TTL.
        key_func: Optional function to generate custom cache key.
                 Should accept same args as decorated function and return string.
        cache: Cache to use. Defaults to the shared application cache.

    Returns:
        Decorated function

    Example:
        @cached(ttl=600)
        def get_store(store_id):
            return db.read("stores", store_id)

        @cached(ttl=60, key_func=lambda product_id: f"product:{product_id}")
        def get_product(product_id):
            return db.read("products", product_id)
    """

    def decorator(func: Callable) -> Callable:
        def _key(args: tuple, kwargs: dict) -> str:
            if key_func:
                return key_func(*args, **kwargs)
            return _generate_cache_key(func.__name__, args, kwargs)

        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                target = cache if cache is not None else get_cache()
                cache_key = _key(args, kwargs)

                cached_value = target.get(cache_key, _MISSING)
                if cached_value is not _MISSING:
                    logger.debug(f"Cache hit for {cache_key}")
                    return cached_value

                result = await func(*args, **kwargs)
                target.set(cache_key, result, ttl)
                return result

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            target = cache if cache is not None else get_cache()
            cache_key = _key(args, kwargs)
            return target.remember(cache_key, lambda: func(*args, **kwargs), ttl)

        return sync_wrapper

    return decorator


def cache_invalidate(pattern: str, cache: PerformanceCache | None = None) -> Callable:
    """
    Decorator to invalidate cache entries matching a pattern on function call.

    Used on write operations to clear related cached reads.
    Invalidates cache AFTER the function executes, even if it raised.

    Args:
        pattern: Glob pattern to match cache keys.
                Examples: "product:*", "user:*"
        cache: Cache to use. Defaults to the shared application cache.

    Returns:
        Decorated function

    Example:
        @cache_invalidate("product:*")
        def update_product(product_id, data):
            db.update("products", product_id, data)
    """

    def decorator(func: Callable) -> Callable:
        def _invalidate() -> None:
            target = cache if cache is not None else get_cache()
            count = target.clear_pattern(pattern)
            logger.debug(f"Invalidated {count} cache keys matching pattern: {pattern}")

        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    return await func(*args, **kwargs)
                finally:
                    _invalidate()

            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            finally:
                _invalidate()

        return sync_wrapper

    return decorator
