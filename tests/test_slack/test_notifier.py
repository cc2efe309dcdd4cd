"""Tests for override notifications and the requester fallback chain.

notify_requester must never raise: ephemeral, then DM, then a log line.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from slack_sdk.errors import SlackApiError

from oncall_override.models.override import TimeWindow
from oncall_override.slack.notifier import (
    format_override_created,
    notify_override_created,
    notify_requester,
    slack_date,
)

START = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
WINDOW = TimeWindow(start=START, end=START + timedelta(hours=2))


def _slack_error(code: str = "not_in_channel") -> SlackApiError:
    return SlackApiError(message=code, response={"ok": False, "error": code})


@pytest.fixture()
def ephemeral():
    with patch("oncall_override.slack.notifier.post_ephemeral", new_callable=AsyncMock) as m:
        yield m


@pytest.fixture()
def direct():
    with patch("oncall_override.slack.notifier.post_direct_message", new_callable=AsyncMock) as m:
        yield m


# -- notify_requester --


async def test_requester_gets_ephemeral(ephemeral: AsyncMock, direct: AsyncMock):
    await notify_requester("C1", "U1", "oops")

    ephemeral.assert_awaited_once_with("C1", "U1", "oops")
    direct.assert_not_awaited()


async def test_requester_falls_back_to_dm(ephemeral: AsyncMock, direct: AsyncMock):
    """When the bot is not in the channel, the message goes by DM."""
    ephemeral.side_effect = _slack_error()

    await notify_requester("C1", "U1", "oops")

    direct.assert_awaited_once_with("U1", "oops")


async def test_requester_only_logs_when_everything_fails(
    ephemeral: AsyncMock, direct: AsyncMock, caplog
):
    ephemeral.side_effect = _slack_error()
    direct.side_effect = _slack_error("cannot_dm_bot")

    # Must not raise
    await notify_requester("C1", "U1", "undeliverable text")

    assert "undeliverable text" in caplog.text


async def test_requester_survives_non_slack_errors(ephemeral: AsyncMock, direct: AsyncMock):
    ephemeral.side_effect = ConnectionError("network down")
    direct.side_effect = RuntimeError("Failed to open DM channel")

    await notify_requester("C1", "U1", "oops")


# -- success message --


def test_slack_date_formatting():
    text = slack_date(START)
    assert text.startswith(f"<!date^{int(START.timestamp())}^{{time}} on {{date_short}}|")
    assert "2026-10-19 12:00 UTC" in text


def test_format_override_created():
    text = format_override_created("Alice", "2h", WINDOW, "U_REQ")

    assert "*Alice*" in text
    assert "(2h)" in text
    assert f"<!date^{int(WINDOW.start.timestamp())}^" in text
    assert f"<!date^{int(WINDOW.end.timestamp())}^" in text
    assert "Requested by <@U_REQ>" in text


async def test_notify_override_created_posts_to_channel():
    with patch("oncall_override.slack.notifier.post_message", new_callable=AsyncMock) as post:
        await notify_override_created("C_OVERRIDES", "Alice", "2h", WINDOW, "U_REQ")

    channel, text = post.call_args.args
    assert channel == "C_OVERRIDES"
    assert "Alice" in text


async def test_notify_override_created_propagates_errors():
    with patch("oncall_override.slack.notifier.post_message", new_callable=AsyncMock) as post:
        post.side_effect = _slack_error()
        with pytest.raises(SlackApiError):
            await notify_override_created("C1", "Alice", "2h", WINDOW, "U_REQ")
