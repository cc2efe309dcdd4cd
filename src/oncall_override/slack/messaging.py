"""Slack Web API calls used by the override flow.

Posting and modal calls log failures and re-raise so the caller can fall
back to another delivery route. Profile lookup fails soft and returns None.
"""

import logging

from slack_sdk.errors import SlackApiError

from oncall_override.models.slack import SlackProfile
from oncall_override.slack.client import get_slack_client

logger = logging.getLogger(__name__)


async def get_user_profile(user_id: str) -> SlackProfile | None:
    """Return the user's email and display name, or None if unavailable.

    The name is the profile display name, then the real name, then "Unknown".
    Users without a visible email (bots, missing users:read.email scope) give None.
    """
    try:
        client = await get_slack_client()
        response = await client.users_info(user=user_id)
    except Exception:
        logger.warning("Failed to fetch Slack profile for %s", user_id, exc_info=True)
        return None

    user = response.get("user") or {}
    profile = user.get("profile") or {}
    email = profile.get("email")
    if not email:
        logger.info("Slack user %s has no email on their profile", user_id)
        return None

    name = profile.get("display_name") or user.get("real_name") or "Unknown"
    return SlackProfile(email=email, name=name)


async def post_message(channel: str, text: str) -> None:
    """Post a plain message to a channel."""
    try:
        client = await get_slack_client()
        await client.chat_postMessage(channel=channel, text=text)
    except SlackApiError:
        logger.error("Failed to post message to %s", channel, exc_info=True)
        raise


async def post_ephemeral(channel: str, user: str, text: str) -> None:
    """Post a message only user can see in channel."""
    try:
        client = await get_slack_client()
        await client.chat_postEphemeral(channel=channel, user=user, text=text)
    except SlackApiError:
        logger.error("Failed to post ephemeral message to %s in %s", user, channel, exc_info=True)
        raise


async def post_direct_message(user: str, text: str) -> None:
    """Open (or reuse) an IM with user and post text there."""
    try:
        client = await get_slack_client()
        opened = await client.conversations_open(users=user)
        channel_id = (opened.get("channel") or {}).get("id")
        if not channel_id:
            raise RuntimeError(f"Failed to open DM channel with {user}")
        await client.chat_postMessage(channel=channel_id, text=text)
    except (SlackApiError, RuntimeError):
        logger.error("Failed to send direct message to %s", user, exc_info=True)
        raise


async def open_modal(trigger_id: str, view: dict) -> None:
    """Open a modal view for the interaction that produced trigger_id."""
    try:
        client = await get_slack_client()
        await client.views_open(trigger_id=trigger_id, view=view)
    except SlackApiError:
        logger.error("Failed to open modal", exc_info=True)
        raise
