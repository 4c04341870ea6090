"""
Cached user and permission lookups.

Wraps the application's user loader and permission checker so repeated
dashboard requests hit memory instead of the document store. The loaders are
injected; this module only decides keys, TTLs and invalidation.

Key layout:
    user:<user_id>                          user record (password_hash removed)
    user_perms:<user_id>                    full permission list
    perm:<user_id>:<permission>             single permission check
    perms_batch:<user_id>:<md5>             batch of permission checks
"""

import hashlib
import logging
import time
from collections.abc import Callable, Iterable
from typing import Any

from ..config import USER_CACHE_TTL_SECONDS
from .app_context import get_cache
from .cache_manager import PerformanceCache, escape_glob

logger = logging.getLogger(__name__)

SENSITIVE_USER_FIELDS = ("password_hash",)

DASHBOARD_PERMISSIONS = (
    "can_view_reports",
    "can_view_inventory",
    "can_add_inventory",
    "can_edit_inventory",
    "can_delete_inventory",
    "can_view_stores",
    "can_add_stores",
    "can_edit_stores",
    "can_delete_stores",
    "can_use_pos",
    "can_manage_pos",
    "can_view_users",
    "can_manage_users",
    "can_configure_system",
)

UserLoader = Callable[[str], Any]
PermissionChecker = Callable[[str, str], bool]


def _resolve(cache: PerformanceCache | None) -> PerformanceCache:
    return cache if cache is not None else get_cache()


def _strip_sensitive(user: Any) -> Any:
    if isinstance(user, dict):
        return {k: v for k, v in user.items() if k not in SENSITIVE_USER_FIELDS}
    return user


def user_key(user_id: str) -> str:
    return f"user:{user_id}"


def permission_key(user_id: str, permission: str) -> str:
    return f"perm:{user_id}:{permission}"


def batch_permission_key(user_id: str, permissions: Iterable[str]) -> str:
    digest = hashlib.md5(",".join(sorted(permissions)).encode()).hexdigest()  # nosec B324 # noqa: S324 - cache key, not crypto
    return f"perms_batch:{user_id}:{digest}"


def cached_user(user_id: str, loader: UserLoader, cache: PerformanceCache | None = None) -> Any:
    """Load a user record through the cache, without its password hash."""
    return _resolve(cache).remember(
        user_key(user_id),
        lambda: _strip_sensitive(loader(user_id)),
        USER_CACHE_TTL_SECONDS,
    )


def cached_permission_check(
    user_id: str,
    permission: str,
    checker: PermissionChecker,
    cache: PerformanceCache | None = None,
) -> bool:
    return _resolve(cache).remember(
        permission_key(user_id, permission),
        lambda: bool(checker(user_id, permission)),
        USER_CACHE_TTL_SECONDS,
    )


def batch_permission_check(
    user_id: str,
    permissions: Iterable[str],
    checker: PermissionChecker,
    cache: PerformanceCache | None = None,
) -> dict[str, bool]:
    """
    Check several permissions with a single cache entry.

    The key depends only on the set of permissions, not on their order.
    """
    permissions = list(permissions)

    def check_all() -> dict[str, bool]:
        return {perm: bool(checker(user_id, perm)) for perm in permissions}

    return _resolve(cache).remember(
        batch_permission_key(user_id, permissions),
        check_all,
        USER_CACHE_TTL_SECONDS,
    )


def cached_user_permissions(
    user_id: str,
    loader: UserLoader,
    cache: PerformanceCache | None = None,
) -> Any:
    return _resolve(cache).remember(
        f"user_perms:{user_id}",
        lambda: loader(user_id),
        USER_CACHE_TTL_SECONDS,
    )


def prewarm_dashboard_cache(
    user_id: str,
    user_loader: UserLoader,
    checker: PermissionChecker,
    permissions: Iterable[str] = DASHBOARD_PERMISSIONS,
    cache: PerformanceCache | None = None,
) -> int:
    """
    Populate the user record and dashboard permissions right after login.

    Returns:
        Number of permissions warmed
    """
    target = _resolve(cache)
    start = time.perf_counter()

    cached_user(user_id, user_loader, cache=target)
    count = 0
    for permission in permissions:
        cached_permission_check(user_id, permission, checker, cache=target)
        count += 1

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Cache prewarmed for user {user_id} in {duration_ms:.2f}ms",
        extra={"user_id": user_id, "permissions": count},
    )
    return count


def clear_user_cache(user_id: str, cache: PerformanceCache | None = None) -> int:
    """
    Drop everything cached for one user. Call after permission changes.

    Returns:
        Number of entries removed
    """
    target = _resolve(cache)
    removed = int(target.delete(user_key(user_id)))
    removed += int(target.delete(f"user_perms:{user_id}"))
    removed += target.clear_pattern(f"perm:{escape_glob(user_id)}:*")
    removed += target.clear_pattern(f"perms_batch:{escape_glob(user_id)}:*")
    logger.debug(f"Cleared {removed} cache entries for user {user_id}")
    return removed


def clear_permission_cache(user_id: str | None = None, cache: PerformanceCache | None = None) -> int:
    """Clear one user's entries, or every user and permission entry."""
    if user_id:
        return clear_user_cache(user_id, cache=cache)

    target = _resolve(cache)
    return sum(
        target.clear_pattern(pattern)
        for pattern in ("perm:*", "perms_batch:*", "user:*", "user_perms:*")
    )
