"""
Observability module: structured logging, request IDs, metrics.

Usage:
    from perfcache.observability import get_logger, RequestContext

    logger = get_logger(__name__)
    logger.info("Invalidated user entries", extra={"user_id": "123"})

    with RequestContext() as ctx:
        logger.info("Request started", extra={"request_id": ctx.request_id})

Metrics:
    from perfcache.observability import REGISTRY, publish_cache_stats

    publish_cache_stats(get_cache().get_stats())
    print(REGISTRY.to_prometheus())
"""

from .context import RequestContext, generate_request_id, get_request_id, set_request_id
from .logging import (
    CorrelationIdMiddleware,
    HumanFormatter,
    JSONFormatter,
    configure_logging,
    configure_request_logging,
    get_logger,
)
from .metrics import (
    REGISTRY,
    Counter,
    Gauge,
    MetricsRegistry,
    api_requests,
    get_registry,
    publish_cache_stats,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "configure_request_logging",
    "JSONFormatter",
    "HumanFormatter",
    "CorrelationIdMiddleware",
    # Context
    "RequestContext",
    "generate_request_id",
    "get_request_id",
    "set_request_id",
    # Metrics
    "REGISTRY",
    "Counter",
    "Gauge",
    "MetricsRegistry",
    "get_registry",
    "api_requests",
    "publish_cache_stats",
]
