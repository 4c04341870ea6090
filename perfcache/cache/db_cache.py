"""
Cached database record, listing and query reads.

Sits in front of the document store: single records by table and id, whole
table listings, and named query results. Loaders are injected; this module
only decides keys, TTLs and invalidation.

Key layout:
    <table>:<record_id>         single record
    <table>:_list               full table listing
    query:<query_key>           named query result
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..config import LIST_TTL_SECONDS, RECORD_TTL_SECONDS
from .app_context import get_cache
from .cache_manager import _MISSING, TTL, PerformanceCache, escape_glob
from .user_cache import clear_user_cache

logger = logging.getLogger(__name__)

LIST_SUFFIX = "_list"

RecordLoader = Callable[[], Any]
BatchLoader = Callable[[list], Mapping[Any, Any]]


def _resolve(cache: PerformanceCache | None) -> PerformanceCache:
    return cache if cache is not None else get_cache()


def record_key(table: str, record_id: Any) -> str:
    return f"{table}:{record_id}"


def list_key(table: str) -> str:
    return f"{table}:{LIST_SUFFIX}"


def query_key(name: str) -> str:
    return f"query:{name}"


def cached_record(
    table: str,
    record_id: Any,
    loader: RecordLoader,
    ttl: TTL = RECORD_TTL_SECONDS,
    cache: PerformanceCache | None = None,
) -> Any:
    """
    Read one record through the cache.

    A loader that returns None (record not found) is not cached, so a record
    created afterwards is picked up on the next read.
    """
    target = _resolve(cache)
    key = record_key(table, record_id)

    value = target.get(key, _MISSING)
    if value is not _MISSING:
        return value

    value = loader()
    if value is not None:
        target.set(key, value, ttl)
    return value


def get_batch(
    table: str,
    record_ids: Iterable[Any],
    loader: BatchLoader,
    ttl: TTL = RECORD_TTL_SECONDS,
    cache: PerformanceCache | None = None,
) -> dict[Any, Any]:
    """
    Read many records, loading only the ones not already cached.

    Args:
        table: Table name used as the key prefix
        record_ids: Ids to read
        loader: Called once with the list of uncached ids; returns {id: record}
        ttl: Lifetime of each freshly loaded record
        cache: Cache to use. Defaults to the shared application cache.

    Returns:
        {id: record} for every cached or loaded id. Ids the loader did not
        return are absent.
    """
    target = _resolve(cache)
    results: dict[Any, Any] = {}
    missing: list = []

    for record_id in record_ids:
        value = target.get(record_key(table, record_id), _MISSING)
        if value is _MISSING:
            missing.append(record_id)
        else:
            results[record_id] = value

    if missing:
        fetched = loader(missing)
        for record_id, value in fetched.items():
            if value is not None:
                target.set(record_key(table, record_id), value, ttl)
            results[record_id] = value
        logger.debug(f"Loaded {len(fetched)} of {len(missing)} uncached {table} records")

    return results


def cached_list(
    table: str,
    loader: RecordLoader,
    ttl: TTL = LIST_TTL_SECONDS,
    cache: PerformanceCache | None = None,
) -> Any:
    """Read a full table listing through the cache."""
    return _resolve(cache).remember(list_key(table), loader, ttl)


def cached_query(
    name: str,
    loader: RecordLoader,
    ttl: TTL = LIST_TTL_SECONDS,
    cache: PerformanceCache | None = None,
) -> Any:
    return _resolve(cache).remember(query_key(name), loader, ttl)


def invalidate(table: str, record_id: Any = None, cache: PerformanceCache | None = None) -> int:
    """
    Drop one cached record, or every cached entry of a table.

    With no record_id the table's listing goes too.

    Returns:
        Number of entries removed
    """
    target = _resolve(cache)
    if record_id is None:
        return target.clear_pattern(f"{escape_glob(table)}:*")
    return int(target.delete(record_key(table, record_id)))


def invalidate_user_cache(user_id: Any, cache: PerformanceCache | None = None) -> int:
    """Drop a user's record, the users listing, and their permission entries."""
    target = _resolve(cache)
    removed = invalidate("users", user_id, cache=target)
    removed += invalidate("users", cache=target)
    removed += clear_user_cache(str(user_id), cache=target)
    return removed


def invalidate_store_cache(store_id: Any = None, cache: PerformanceCache | None = None) -> int:
    return invalidate("stores", store_id, cache=cache)


def invalidate_product_cache(product_id: Any = None, cache: PerformanceCache | None = None) -> int:
    return invalidate("products", product_id, cache=cache)
