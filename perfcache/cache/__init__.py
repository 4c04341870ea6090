"""
In-memory performance cache for the inventory application.

Provides:
- PerformanceCache: TTL cache with pattern invalidation and hit/miss stats
- AppContext / get_cache: access to the process's shared cache
- cache_get, cache_set, ...: free functions over the shared cache
- @cached / @cache_invalidate: decorators for reads and writes
- cached_user, cached_permission_check, ...: user and permission lookups
- cached_record, get_batch, cached_list, ...: database record reads
"""

from .app_context import AppContext, get_app_context, get_cache, reset_app_context, set_app_context
from .cache_manager import CacheEntry, CacheStats, PerformanceCache
from .db_cache import (
    cached_list,
    cached_query,
    cached_record,
    get_batch,
    invalidate,
    invalidate_product_cache,
    invalidate_store_cache,
    invalidate_user_cache,
)
from .decorators import cache_invalidate, cached
from .helpers import (
    cache_clear_pattern,
    cache_delete,
    cache_get,
    cache_remember,
    cache_set,
    cache_stats,
)
from .user_cache import (
    DASHBOARD_PERMISSIONS,
    batch_permission_check,
    cached_permission_check,
    cached_user,
    cached_user_permissions,
    clear_permission_cache,
    clear_user_cache,
    prewarm_dashboard_cache,
)

__all__ = [
    # Core
    "PerformanceCache",
    "CacheEntry",
    "CacheStats",
    # Context
    "AppContext",
    "get_app_context",
    "set_app_context",
    "reset_app_context",
    "get_cache",
    # Free functions
    "cache_get",
    "cache_set",
    "cache_remember",
    "cache_delete",
    "cache_clear_pattern",
    "cache_stats",
    # Decorators
    "cached",
    "cache_invalidate",
    # User / permission lookups
    "DASHBOARD_PERMISSIONS",
    "cached_user",
    "cached_permission_check",
    "batch_permission_check",
    "cached_user_permissions",
    "prewarm_dashboard_cache",
    "clear_user_cache",
    "clear_permission_cache",
    # Record, listing and query reads
    "cached_record",
    "get_batch",
    "cached_list",
    "cached_query",
    "invalidate",
    "invalidate_user_cache",
    "invalidate_store_cache",
    "invalidate_product_cache",
]
