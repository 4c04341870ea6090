"""
Test configuration: repo root on sys.path plus cache isolation.

This allows tests to import from top-level packages (perfcache, api).
Every test starts with no shared application context, so nothing cached by
one test leaks into the next.
"""

import sys
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import perfcache.*, api.*
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from perfcache.cache import AppContext, PerformanceCache, reset_app_context, set_app_context  # noqa: E402
from perfcache.config import CacheConfig  # noqa: E402

# Cache env vars that would change defaults under test
_CACHE_ENV_VARS = (
    "PERF_CACHE_CONFIG",
    "PERF_CACHE_DEFAULT_TTL",
    "PERF_CACHE_MAX_ENTRIES",
    "PERF_CACHE_ENABLED",
    "PERF_CACHE_COPY_VALUES",
)


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def isolated_cache_context(monkeypatch):
    """Clear cache env vars and the shared context around every test."""
    for var in _CACHE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_app_context()
    yield
    reset_app_context()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> PerformanceCache:
    """Fresh cache on the fake clock with a 60s default TTL."""
    return PerformanceCache(CacheConfig(default_ttl=60), clock=clock)


@pytest.fixture
def shared_cache(clock) -> PerformanceCache:
    """Install a fake-clock cache as the process-wide shared cache."""
    context = AppContext.create(CacheConfig(default_ttl=60), clock=clock)
    set_app_context(context)
    return context.cache
