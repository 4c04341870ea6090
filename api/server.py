"""
Inventory Performance Cache API Server - cache administration and metrics.
"""
# ruff: noqa: S104
# S104: Development server binding (guarded by __name__ check)

import os
from datetime import datetime

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from api.cache_router import cache_router
from api.response_models import HealthResponse
from perfcache import config
from perfcache.cache import get_cache
from perfcache.observability import (
    configure_logging,
    configure_request_logging,
    get_logger,
    get_registry,
    publish_cache_stats,
)

logger = get_logger(__name__)

app = FastAPI(
    title="Inventory Performance Cache API",
    description="Inspect and invalidate the inventory application's in-memory cache",
    version="1.0.0",
)

# CORS middleware - configurable via CORS_ORIGINS env var
# Dev default: allow all origins; Production: set CORS_ORIGINS to comma-separated list
cors_origins = (
    ["*"] if config.CORS_ORIGINS == "*" else [o.strip() for o in config.CORS_ORIGINS.split(",")]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
configure_request_logging(app)

app.include_router(cache_router, prefix="/api/cache")


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "cache_enabled": get_cache().enabled,
        "timestamp": datetime.now().isoformat(),
    }


@app.get("/api/metrics", response_class=PlainTextResponse)
async def metrics():
    """
    Prometheus-format metrics endpoint.

    Refreshes the perf_cache_* gauges from the live cache before exporting.
    """
    publish_cache_stats(get_cache().get_stats())
    return get_registry().to_prometheus()


# ==== Main ====


def main():
    """Run the server."""
    json_logs = os.environ.get("PERF_CACHE_LOG_JSON")
    configure_logging(
        level=config.LOG_LEVEL,
        json_format=None if json_logs is None else json_logs.lower() == "true",
    )
    logger.info(f"Starting cache admin API on port {config.SERVER_PORT}")
    uvicorn.run(app, host="0.0.0.0", port=config.SERVER_PORT)


if __name__ == "__main__":
    main()
