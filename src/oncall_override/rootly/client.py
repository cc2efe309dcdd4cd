"""Async Rootly REST client and process-wide singleton.

Wraps an httpx.AsyncClient with bearer auth against the Rootly JSON:API.
Only the three calls the override flow needs are implemented: listing users,
looking a user up by email, and creating an override shift.
"""

import logging

import httpx

from oncall_override.config import get_settings
from oncall_override.errors import ConfigurationMissing, UpstreamError
from oncall_override.models.override import OverrideResult, TimeWindow
from oncall_override.models.rootly import RootlyUser

logger = logging.getLogger(__name__)

_PAGE_SIZE = 100


class RootlyClient:
    """Typed wrapper over the Rootly endpoints used by the bot."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    def _require_key(self) -> None:
        if not self._api_key:
            raise ConfigurationMissing("rootly_api_key")

    @staticmethod
    def _check(response: httpx.Response, action: str) -> None:
        if response.is_success:
            return
        logger.error(
            "Rootly %s failed: %s %s", action, response.status_code, response.text
        )
        raise UpstreamError(response.status_code, response.text, action)

    async def list_users_uncached(self) -> list[RootlyUser]:
        """Fetch every user in the Rootly directory, following pagination."""
        self._require_key()
        logger.info("Fetching Rootly users from API")

        users: list[RootlyUser] = []
        url: str | None = "/users"
        params: dict | None = {"page[size]": _PAGE_SIZE}
        seen: set[str] = set()

        while url and url not in seen:
            seen.add(url)
            response = await self._http.get(url, params=params)
            self._check(response, "list users")
            body = response.json()
            users.extend(RootlyUser.from_api(record) for record in body.get("data") or [])
            # links.next is absolute and already carries the paging params
            url = (body.get("links") or {}).get("next")
            params = None

        logger.info("Fetched %d Rootly users", len(users))
        return users

    async def find_user_by_email(self, email: str) -> RootlyUser | None:
        """Return the Rootly user whose email matches exactly, or None."""
        self._require_key()
        response = await self._http.get("/users", params={"filter[email]": email})
        self._check(response, "find user by email")

        wanted = email.strip().lower()
        for record in response.json().get("data") or []:
            user = RootlyUser.from_api(record)
            if user.email.strip().lower() == wanted:
                return user
        return None

    async def create_override(
        self, user_id: str, schedule_id: str, window: TimeWindow
    ) -> OverrideResult:
        """Create an override shift on schedule_id for user_id over window."""
        self._require_key()
        payload = {
            "data": {
                "type": "shifts",
                "attributes": {
                    "user_id": int(user_id) if user_id.isdigit() else user_id,
                    "starts_at": window.start.isoformat(),
                    "ends_at": window.end.isoformat(),
                },
            }
        }
        response = await self._http.post(
            f"/schedules/{schedule_id}/override_shifts",
            json=payload,
            headers={"Content-Type": "application/vnd.api+json"},
        )
        self._check(response, "create override")

        data = response.json().get("data") or {}
        result = OverrideResult(id=str(data.get("id") or "unknown"))
        logger.info(
            "Created Rootly override %s for user %s on schedule %s",
            result.id,
            user_id,
            schedule_id,
        )
        return result


_client: RootlyClient | None = None


def get_rootly_client() -> RootlyClient:
    """Return a cached Rootly client built from settings on first call."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = RootlyClient(
            api_key=settings.rootly_api_key,
            base_url=settings.rootly_api_base_url,
            timeout=settings.rootly_timeout_seconds,
        )
    return _client


def reset_client() -> None:
    """Reset the cached client instance. Used for testing."""
    global _client
    _client = None


async def close_client() -> None:
    """Close the cached client's connection pool, if one was created."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
