"""
Cache Admin API Router: inspection and invalidation endpoints.

Lets operators read cache statistics and drop stale entries (for example
after editing a user's permissions) without restarting the process.

Usage in server.py:
    from api.cache_router import cache_router
    app.include_router(cache_router, prefix="/api/cache")
"""

import logging

from fastapi import APIRouter, Depends

from api.response_models import CacheStatsResponse, InvalidateRequest, MutationResponse
from perfcache.cache import PerformanceCache, clear_user_cache, get_cache
from perfcache.observability import api_requests

logger = logging.getLogger(__name__)

cache_router = APIRouter(tags=["Cache"])


def cache_dependency() -> PerformanceCache:
    """Resolve the shared cache. Overridden in tests."""
    return get_cache()


@cache_router.get("/stats", response_model=CacheStatsResponse)
async def get_cache_stats(cache: PerformanceCache = Depends(cache_dependency)):
    """Current hit/miss counters and live entry count."""
    api_requests.inc()
    return cache.get_stats().to_dict()


@cache_router.delete("/keys/{key:path}", response_model=MutationResponse)
async def delete_cache_key(key: str, cache: PerformanceCache = Depends(cache_dependency)):
    """Remove a single key. Succeeds whether or not the key existed."""
    api_requests.inc()
    removed = cache.delete(key)
    logger.info(f"Deleted cache key {key!r} (existed={removed})")
    return {"success": True, "removed": int(removed), "key": key}


@cache_router.post("/invalidate", response_model=MutationResponse)
async def invalidate_pattern(
    body: InvalidateRequest,
    cache: PerformanceCache = Depends(cache_dependency),
):
    """Remove every key matching a glob pattern."""
    api_requests.inc()
    removed = cache.clear_pattern(body.pattern)
    logger.info(f"Invalidated {removed} cache keys matching {body.pattern!r}")
    return {"success": True, "removed": removed, "pattern": body.pattern}


@cache_router.post("/cleanup", response_model=MutationResponse)
async def cleanup_expired(cache: PerformanceCache = Depends(cache_dependency)):
    """Sweep expired entries now instead of waiting for lazy removal."""
    api_requests.inc()
    return {"success": True, "removed": cache.cleanup_expired()}


@cache_router.post("/users/{user_id}/clear", response_model=MutationResponse)
async def clear_user(user_id: str, cache: PerformanceCache = Depends(cache_dependency)):
    """Drop a user's record and permission entries."""
    api_requests.inc()
    removed = clear_user_cache(user_id, cache=cache)
    logger.info(f"Cleared {removed} cache entries for user {user_id}")
    return {"success": True, "removed": removed, "user_id": user_id}
