"""Tests for the override orchestrator."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from oncall_override.errors import UpstreamError
from oncall_override.models.override import OverrideRequest, OverrideResult
from oncall_override.models.rootly import RootlyUser
from oncall_override.models.slack import SlackProfile
from oncall_override.overrides import create_override

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
ALICE = RootlyUser(id="42", name="Alice", email="alice@example.com")


def _mock_settings(**overrides) -> MagicMock:
    settings = MagicMock()
    settings.rootly_schedule_id = "sched-1"
    settings.rootly_api_key = "rootly-key"
    settings.override_channel_id = ""
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


def _mention_request(duration: str = "1h") -> OverrideRequest:
    return OverrideRequest(
        slack_user_id="U123", duration=duration, requesting_user_id="U_REQ", channel_id="C1"
    )


def _modal_request(duration: str = "2h") -> OverrideRequest:
    return OverrideRequest(
        rootly_user_id="42", duration=duration, requesting_user_id="U_REQ", channel_id="C1"
    )


@pytest.fixture()
def deps():
    """Patch every collaborator of create_override; yield them by name."""
    rootly = MagicMock()
    rootly.find_user_by_email = AsyncMock(return_value=ALICE)
    rootly.create_override = AsyncMock(return_value=OverrideResult(id="shift-1"))
    with (
        patch("oncall_override.overrides.get_settings", return_value=_mock_settings()) as settings,
        patch("oncall_override.overrides.get_rootly_client", return_value=rootly),
        patch("oncall_override.overrides.get_user_profile", new_callable=AsyncMock) as profile,
        patch("oncall_override.overrides.find_user_by_id", new_callable=AsyncMock) as by_id,
        patch("oncall_override.overrides.notify_override_created", new_callable=AsyncMock) as created,
        patch("oncall_override.overrides.notify_requester", new_callable=AsyncMock) as requester,
    ):
        profile.return_value = SlackProfile(email="alice@example.com", name="alice")
        by_id.return_value = ALICE
        yield {
            "settings": settings,
            "rootly": rootly,
            "profile": profile,
            "by_id": by_id,
            "created": created,
            "requester": requester,
        }


async def test_mention_override_end_to_end(deps):
    """1h for <@U123>: email lookup, Rootly match, now..now+1h, success message."""
    result = await create_override(_mention_request("1h"), now=NOW)

    assert result == OverrideResult(id="shift-1")
    deps["profile"].assert_awaited_once_with("U123")
    deps["rootly"].find_user_by_email.assert_awaited_once_with("alice@example.com")

    user_id, schedule_id, window = deps["rootly"].create_override.call_args.args
    assert (user_id, schedule_id) == ("42", "sched-1")
    assert window.start == NOW
    assert window.end == NOW + timedelta(hours=1)

    channel, user_name, duration, posted_window, requester = deps["created"].call_args.args
    assert (channel, user_name, duration, requester) == ("C1", "Alice", "1h", "U_REQ")
    assert posted_window == window
    deps["requester"].assert_not_awaited()


async def test_modal_override_uses_rootly_id(deps):
    """A Rootly id from the modal skips Slack lookups and names the user from the directory."""
    result = await create_override(_modal_request("2h"), now=NOW)

    assert result.id == "shift-1"
    deps["profile"].assert_not_awaited()
    deps["rootly"].find_user_by_email.assert_not_awaited()
    deps["by_id"].assert_awaited_once_with("42")
    assert deps["created"].call_args.args[1] == "Alice"


async def test_modal_override_name_falls_back_to_id(deps):
    deps["by_id"].side_effect = RuntimeError("directory down")

    await create_override(_modal_request(), now=NOW)

    assert deps["created"].call_args.args[1] == "42"


async def test_confirmation_goes_to_override_channel(deps):
    deps["settings"].return_value = _mock_settings(override_channel_id="C_OVERRIDES")

    await create_override(_mention_request(), now=NOW)

    assert deps["created"].call_args.args[0] == "C_OVERRIDES"


async def test_invalid_duration_notifies_requester(deps):
    result = await create_override(_mention_request("0m"), now=NOW)

    assert result is None
    deps["rootly"].create_override.assert_not_awaited()
    channel, user, text = deps["requester"].call_args.args
    assert (channel, user) == ("C1", "U_REQ")
    assert "Error creating override" in text
    assert "positive" in text


async def test_user_without_slack_email_notifies_requester(deps):
    deps["profile"].return_value = None

    assert await create_override(_mention_request(), now=NOW) is None
    assert "U123" in deps["requester"].call_args.args[2]


async def test_user_missing_from_rootly_notifies_requester(deps):
    deps["rootly"].find_user_by_email.return_value = None

    assert await create_override(_mention_request(), now=NOW) is None
    assert "alice@example.com" in deps["requester"].call_args.args[2]


@pytest.mark.parametrize("missing", ["rootly_schedule_id", "rootly_api_key"])
async def test_missing_configuration_notifies_requester(deps, missing: str):
    deps["settings"].return_value = _mock_settings(**{missing: ""})

    assert await create_override(_mention_request(), now=NOW) is None
    deps["rootly"].create_override.assert_not_awaited()
    assert missing.upper() in deps["requester"].call_args.args[2]


async def test_upstream_error_notifies_requester(deps):
    deps["rootly"].create_override.side_effect = UpstreamError(422, "overlapping shift", "create override")

    assert await create_override(_mention_request(), now=NOW) is None
    text = deps["requester"].call_args.args[2]
    assert "422" in text
    assert "overlapping shift" in text
    deps["created"].assert_not_awaited()


async def test_confirmation_failure_reports_created_override(deps):
    """If posting the confirmation fails, the requester learns the override exists."""
    deps["created"].side_effect = RuntimeError("not_in_channel")

    result = await create_override(_mention_request(), now=NOW)

    assert result == OverrideResult(id="shift-1")
    text = deps["requester"].call_args.args[2]
    assert "shift-1 was created" in text
