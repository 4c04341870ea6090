"""
Centralized configuration for the inventory performance cache.

Values that vary by deployment belong here.
Override via environment variables, or point PERF_CACHE_CONFIG at a YAML file.
"""

import logging
import os
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# ============================================================
# Cache defaults
# ============================================================

DEFAULT_TTL_SECONDS: float = 300.0
"""Entry lifetime when a write does not pass its own ttl (5 minutes)."""

USER_CACHE_TTL_SECONDS: float = 600.0
"""Lifetime of cached user records and permission checks (10 minutes)."""

RECORD_TTL_SECONDS: float = 3600.0
"""Lifetime of a cached database record (1 hour)."""

LIST_TTL_SECONDS: float = 300.0
"""Lifetime of cached table listings and query results (5 minutes)."""

CONFIG_FILE_ENV = "PERF_CACHE_CONFIG"
"""Environment variable naming a YAML config file."""

_ENV_KEYS = {
    "default_ttl": "PERF_CACHE_DEFAULT_TTL",
    "max_entries": "PERF_CACHE_MAX_ENTRIES",
    "enabled": "PERF_CACHE_ENABLED",
    "copy_values": "PERF_CACHE_COPY_VALUES",
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

# ============================================================
# Server / logging
# ============================================================

SERVER_PORT: int = int(os.environ.get("PORT", "8420"))
"""Port for the cache admin API when run directly."""

CORS_ORIGINS: str = os.environ.get("CORS_ORIGINS", "*")
"""Comma-separated allowed origins, or * in development."""

LOG_LEVEL: str = os.environ.get("PERF_CACHE_LOG_LEVEL", "INFO")
"""Root log level applied by configure_logging()."""


class CacheConfigError(ValueError):
    """Raised when cache configuration is missing or malformed."""


def _parse_bool(name: str, raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise CacheConfigError(f"{name} must be a boolean, got {raw!r}")


def _parse_number(name: str, raw: Any, cast=float):
    try:
        return cast(raw)
    except (TypeError, ValueError) as e:
        raise CacheConfigError(f"{name} must be numeric, got {raw!r}") from e


@dataclass(frozen=True)
class CacheConfig:
    """
    Construction-time settings for a PerformanceCache.

    Attributes:
        default_ttl: Seconds an entry lives when set() gets no ttl.
        max_entries: LRU ceiling. None keeps the store unbounded.
        enabled: When False every read misses and every write is refused.
        copy_values: Deep-copy values on write and read so callers never
            share state with the store.
    """

    default_ttl: float = DEFAULT_TTL_SECONDS
    max_entries: int | None = None
    enabled: bool = True
    copy_values: bool = True

    def __post_init__(self) -> None:
        if not math.isfinite(self.default_ttl) or self.default_ttl <= 0:
            raise CacheConfigError(
                f"default_ttl must be a positive finite number, got {self.default_ttl}"
            )
        if self.max_entries is not None and self.max_entries <= 0:
            raise CacheConfigError(f"max_entries must be positive, got {self.max_entries}")

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "CacheConfig":
        """Build a config from a plain mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown cache config keys: {sorted(unknown)}")

        kwargs: dict[str, Any] = {}
        if data.get("default_ttl") is not None:
            kwargs["default_ttl"] = _parse_number("default_ttl", data["default_ttl"])
        if data.get("max_entries") is not None:
            kwargs["max_entries"] = _parse_number("max_entries", data["max_entries"], int)
        if data.get("enabled") is not None:
            kwargs["enabled"] = _parse_bool("enabled", data["enabled"])
        if data.get("copy_values") is not None:
            kwargs["copy_values"] = _parse_bool("copy_values", data["copy_values"])
        return cls(**kwargs)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "CacheConfig":
        """Read PERF_CACHE_* variables. Unset variables keep their defaults."""
        env = os.environ if environ is None else environ
        data = {field: env[var] for field, var in _ENV_KEYS.items() if env.get(var, "") != ""}
        return cls.from_mapping(data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "CacheConfig":
        """
        Load settings from a YAML file.

        Accepts either a top-level ``cache:`` mapping or the settings at the
        top level of the document. An empty file yields the defaults.
        """
        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise CacheConfigError(f"{path}: expected a mapping, got {type(data).__name__}")
        section = data.get("cache", data)
        if not isinstance(section, dict):
            raise CacheConfigError(f"{path}: 'cache' must be a mapping")
        return cls.from_mapping(section)


def load_config(environ: dict[str, str] | None = None) -> CacheConfig:
    """Resolve the active config: YAML file when PERF_CACHE_CONFIG is set, else env vars."""
    env = os.environ if environ is None else environ
    config_file = env.get(CONFIG_FILE_ENV)
    if config_file:
        logger.info(f"Loading cache config from {config_file}")
        return CacheConfig.from_yaml(config_file)
    return CacheConfig.from_env(env)
