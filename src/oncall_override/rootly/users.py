"""Cached Rootly user directory.

The full user listing is held under one global key: every caller shares the
same cached list, which is filtered locally for select menus and name lookups.
"""

from collections.abc import Hashable

from oncall_override.config import get_settings
from oncall_override.models.rootly import RootlyUser
from oncall_override.rootly.cache import ReadThroughCache
from oncall_override.rootly.client import get_rootly_client

USERS_CACHE_KEY = "rootly-users"

_cache: ReadThroughCache[list[RootlyUser]] | None = None


async def _load_users(_key: Hashable) -> list[RootlyUser]:
    return await get_rootly_client().list_users_uncached()


def get_users_cache() -> ReadThroughCache[list[RootlyUser]]:
    """Return the process-wide user cache, built from settings on first use."""
    global _cache
    if _cache is None:
        settings = get_settings()
        _cache = ReadThroughCache(
            _load_users,
            ttl=settings.rootly_users_cache_ttl,
            warm=settings.rootly_users_cache_warm,
        )
    return _cache


async def list_users() -> list[RootlyUser]:
    """Return all Rootly users, from cache when fresh."""
    return await get_users_cache().fetch(USERS_CACHE_KEY)


async def find_user_by_id(user_id: str) -> RootlyUser | None:
    """Look a user up in the cached listing."""
    for user in await list_users():
        if user.id == user_id:
            return user
    return None


def search_users(users: list[RootlyUser], query: str | None) -> list[RootlyUser]:
    """Keep users whose name or email contains query (case-insensitive). Pure function.

    A blank query keeps everyone.
    """
    if not query or not query.strip():
        return list(users)
    needle = query.strip().lower()
    return [u for u in users if needle in u.name.lower() or needle in u.email.lower()]


def reset_users_cache() -> None:
    """Forget the cache instance. Used for testing."""
    global _cache
    _cache = None
