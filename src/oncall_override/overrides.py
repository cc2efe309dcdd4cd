"""Override orchestration: resolve the user, compute the window, create the shift.

create_override runs as a background task after Slack has been acknowledged,
so every failure ends as a message to the requester rather than an exception.
"""

import logging
from datetime import datetime

from oncall_override.config import get_settings
from oncall_override.duration import compute_window, parse_duration
from oncall_override.errors import ConfigurationMissing, UserNotFound
from oncall_override.models.override import OverrideRequest, OverrideResult
from oncall_override.rootly.client import get_rootly_client
from oncall_override.rootly.users import find_user_by_id
from oncall_override.slack.messaging import get_user_profile
from oncall_override.slack.notifier import notify_override_created, notify_requester

logger = logging.getLogger(__name__)


async def resolve_target(request: OverrideRequest) -> tuple[str, str]:
    """Return (rootly_user_id, display_name) for the request's target.

    A Slack mention goes profile -> email -> Rootly search. A Rootly id from
    the modal is used as-is, with the name taken from the cached directory
    when available.
    """
    if request.slack_user_id is not None:
        profile = await get_user_profile(request.slack_user_id)
        if profile is None:
            raise UserNotFound(f"<@{request.slack_user_id}> (no email on their Slack profile)")
        user = await get_rootly_client().find_user_by_email(profile.email)
        if user is None:
            raise UserNotFound(profile.email)
        return user.id, user.name

    rootly_user_id = request.rootly_user_id
    try:
        user = await find_user_by_id(rootly_user_id)
    except Exception:
        logger.warning("Could not look up name for Rootly user %s", rootly_user_id, exc_info=True)
        user = None
    return rootly_user_id, user.name if user else rootly_user_id


async def create_override(
    request: OverrideRequest, now: datetime | None = None
) -> OverrideResult | None:
    """Create the override in Rootly and report the outcome in Slack.

    Steps:
    1. Resolve the target user to a Rootly id
    2. Parse the duration and compute the time window from now
    3. Create the override shift on the configured schedule
    4. Post a confirmation to the override channel (or the original channel)

    Any failure is reported to the requester via notify_requester. Returns
    None when no override was created. Nothing is raised.
    """
    settings = get_settings()
    result: OverrideResult | None = None

    try:
        user_id, user_name = await resolve_target(request)
        duration = parse_duration(request.duration)
        window = compute_window(duration, now)

        if not settings.rootly_schedule_id:
            raise ConfigurationMissing("rootly_schedule_id")
        if not settings.rootly_api_key:
            raise ConfigurationMissing("rootly_api_key")

        result = await get_rootly_client().create_override(
            user_id, settings.rootly_schedule_id, window
        )

        channel_id = settings.override_channel_id or request.channel_id
        await notify_override_created(
            channel_id, user_name, str(duration), window, request.requesting_user_id
        )
    except Exception as exc:
        logger.error(
            "Override for %s (%s) requested by %s failed: %s",
            request.slack_user_id or request.rootly_user_id,
            request.duration,
            request.requesting_user_id,
            exc,
            exc_info=True,
        )
        if result is None:
            text = f"❌ Error creating override: {exc}"
        else:
            text = (
                f"⚠️ Override {result.id} was created, but the confirmation "
                f"could not be posted: {exc}"
            )
        await notify_requester(request.channel_id, request.requesting_user_id, text)
        return result

    logger.info(
        "Override %s created for %s (%s)", result.id, user_name, request.duration
    )
    return result
