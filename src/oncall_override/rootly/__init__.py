"""Rootly directory: REST client, cached user listing, override creation."""

from oncall_override.rootly.cache import ReadThroughCache
from oncall_override.rootly.client import RootlyClient, get_rootly_client, reset_client
from oncall_override.rootly.users import (
    find_user_by_id,
    list_users,
    reset_users_cache,
    search_users,
)

__all__ = [
    "ReadThroughCache",
    "RootlyClient",
    "find_user_by_id",
    "get_rootly_client",
    "list_users",
    "reset_client",
    "reset_users_cache",
    "search_users",
]
