"""Slack client, messaging and notifications. Webhook routes live in slack.router."""

from oncall_override.slack.client import get_slack_client, reset_client
from oncall_override.slack.notifier import notify_override_created, notify_requester

__all__ = [
    "get_slack_client",
    "notify_override_created",
    "notify_requester",
    "reset_client",
]
