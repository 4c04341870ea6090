"""
Shared Pydantic response models for the cache admin API.

These models give FastAPI the type information it needs to generate
accurate OpenAPI schemas instead of empty `schema: {}`.

Usage:
    from api.response_models import CacheStatsResponse, MutationResponse

    @router.get("/stats", response_model=CacheStatsResponse)
    async def stats(): ...
"""

from pydantic import BaseModel, Field

# ==== Cache Stats ====


class CacheStatsResponse(BaseModel):
    """Snapshot of cache counters."""

    hits: int = Field(description="Lookups that found a live entry")
    misses: int = Field(description="Lookups that found nothing or an expired entry")
    sets: int = Field(description="Writes accepted by the cache")
    deletes: int = Field(description="Entries removed by delete, pattern clear or clear")
    evictions: int = Field(default=0, description="Entries evicted by the LRU ceiling")
    expired: int = Field(default=0, description="Entries dropped after their TTL passed")
    current_size: int = Field(description="Live entries currently stored")
    total_requests: int = Field(description="hits + misses")
    hit_rate: float = Field(description="hits / (hits + misses), 0 with no lookups")


# ==== Mutation Result ====
# Used by DELETE/POST endpoints that return {success: bool, ...}.


class MutationResponse(BaseModel):
    """Standard mutation result."""

    success: bool = Field(description="Whether the operation succeeded")
    removed: int = Field(default=0, description="Number of cache entries removed")

    model_config = {"extra": "allow"}


# ==== Requests ====


class InvalidateRequest(BaseModel):
    """Body for pattern invalidation."""

    pattern: str = Field(min_length=1, description="Glob pattern, e.g. user:*")


# ==== Health Check ====


class HealthResponse(BaseModel):
    """Health check result."""

    status: str = Field(description="healthy or error")
    cache_enabled: bool = Field(description="Whether the cache accepts writes")
    timestamp: str = Field(description="ISO timestamp")
