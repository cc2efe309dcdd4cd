"""Slack notifications for override outcomes.

notify_requester is fire-and-forget: it walks ephemeral -> DM -> log and never
raises. notify_override_created lets Slack errors propagate so the caller can
report the failure to the requester instead.
"""

import logging
from datetime import datetime

from oncall_override.models.override import TimeWindow
from oncall_override.slack.messaging import post_direct_message, post_ephemeral, post_message

logger = logging.getLogger(__name__)


def slack_date(moment: datetime) -> str:
    """Render moment with Slack date formatting, localised to the reader."""
    fallback = moment.strftime("%Y-%m-%d %H:%M %Z").strip()
    return f"<!date^{int(moment.timestamp())}^{{time}} on {{date_short}}|{fallback}>"


def format_override_created(
    user_name: str, duration: str, window: TimeWindow, requesting_user_id: str
) -> str:
    """Confirmation text posted after Rootly accepts the override."""
    return (
        f"✅ On-call override created for *{user_name}* ({duration})\n"
        f"⏰ Start: {slack_date(window.start)}\n"
        f"⏰ End: {slack_date(window.end)}\n"
        f"Requested by <@{requesting_user_id}>"
    )


async def notify_override_created(
    channel_id: str,
    user_name: str,
    duration: str,
    window: TimeWindow,
    requesting_user_id: str,
) -> None:
    """Post the success message to channel_id. Raises SlackApiError on failure."""
    await post_message(
        channel_id,
        format_override_created(user_name, duration, window, requesting_user_id),
    )


async def notify_requester(channel_id: str, user_id: str, text: str) -> None:
    """Tell user_id about a problem, trying each delivery route in turn.

    1. Ephemeral message in the original channel.
    2. Direct message (works when the bot is not a member of the channel).
    3. Log the undelivered text.
    """
    try:
        await post_ephemeral(channel_id, user_id, text)
        return
    except Exception:
        logger.warning("Ephemeral message to %s failed, trying DM", user_id)

    try:
        await post_direct_message(user_id, text)
        return
    except Exception:
        logger.warning("Direct message to %s failed as well", user_id)

    logger.error("Could not deliver message to %s: %s", user_id, text)
