# Inventory Performance Cache - Core Library
"""
Exports for the web application and admin API.
"""

from .cache import (
    PerformanceCache,
    cache_clear_pattern,
    cache_delete,
    cache_get,
    cache_remember,
    cache_set,
    cache_stats,
    get_cache,
)
from .config import CacheConfig, CacheConfigError, load_config

__all__ = [
    "CacheConfig",
    "CacheConfigError",
    "load_config",
    "PerformanceCache",
    "get_cache",
    "cache_get",
    "cache_set",
    "cache_remember",
    "cache_delete",
    "cache_clear_pattern",
    "cache_stats",
]
