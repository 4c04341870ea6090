"""
Long-lived application context holding the process's shared cache.

The web application builds one AppContext at start-up (or lets the first
caller build it lazily) and hands its cache to whatever needs it.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from ..config import CacheConfig, load_config
from .cache_manager import PerformanceCache

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Shared, process-lifetime state."""

    config: CacheConfig
    cache: PerformanceCache

    @classmethod
    def create(
        cls,
        config: CacheConfig | None = None,
        clock: Callable[[], float] | None = None,
    ) -> "AppContext":
        """Build a context with a fresh, empty cache."""
        config = config or load_config()
        cache = PerformanceCache(config) if clock is None else PerformanceCache(config, clock=clock)
        logger.info(
            f"Performance cache initialized: default_ttl={config.default_ttl}s, "
            f"max_entries={config.max_entries}, enabled={config.enabled}"
        )
        return cls(config=config, cache=cache)


_context: AppContext | None = None
_context_lock = threading.Lock()


def get_app_context() -> AppContext:
    """Get or create the process-wide application context."""
    global _context
    if _context is None:
        with _context_lock:
            if _context is None:
                _context = AppContext.create()
    return _context


def set_app_context(context: AppContext) -> None:
    """Install an explicitly constructed context."""
    global _context
    with _context_lock:
        _context = context


def reset_app_context() -> None:
    """Drop the current context; the next get_app_context() builds a new one."""
    global _context
    with _context_lock:
        _context = None


def get_cache() -> PerformanceCache:
    """Get the shared cache instance."""
    return get_app_context().cache
