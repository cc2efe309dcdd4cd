"""Slack webhook router with signature verification."""

import logging
from urllib.parse import parse_qsl

from fastapi import APIRouter, BackgroundTasks, Depends, Response
from pydantic import ValidationError

from oncall_override.errors import BadRequest
from oncall_override.models.slack import SlashCommand, decode_interaction
from oncall_override.slack.handlers import handle_command, handle_interaction
from oncall_override.slack.verification import verify_slack_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/slack", tags=["slack"])


def _parse_form(body: bytes) -> dict[str, str]:
    """Decode an application/x-www-form-urlencoded body; last value wins."""
    return dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True))


@router.post("/commands")
async def slack_commands(
    background_tasks: BackgroundTasks,
    body: bytes = Depends(verify_slack_request),
) -> Response:
    """Receive slash commands. Acknowledged with an empty 200; work runs afterwards."""
    try:
        command = SlashCommand.model_validate(_parse_form(body))
    except ValidationError as exc:
        raise BadRequest("Malformed slash command") from exc

    return handle_command(command, background_tasks)


@router.post("/interactions")
async def slack_interactions(
    background_tasks: BackgroundTasks,
    body: bytes = Depends(verify_slack_request),
) -> Response:
    """Receive modal submissions, closures, and select-menu option requests."""
    raw = _parse_form(body).get("payload")
    if not raw:
        raise BadRequest("Missing payload")

    try:
        payload = decode_interaction(raw)
    except ValidationError as exc:
        raise BadRequest("Unhandled interaction payload") from exc

    return await handle_interaction(payload, background_tasks)
