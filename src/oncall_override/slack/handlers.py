"""Slash command and interaction dispatch.

Each inbound request takes exactly one step:

- command "<duration> <@user>"  -> create the override directly (background)
- command with anything else    -> open the override modal (background)
- view_submission               -> validate inline; on success create (background)
- view_closed                   -> log only
- block_suggestion              -> answer with select options inline
"""

import logging
import re

from fastapi import BackgroundTasks, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from oncall_override.config import get_settings
from oncall_override.duration import duration_error
from oncall_override.errors import BadRequest
from oncall_override.models.override import OverrideRequest
from oncall_override.models.rootly import RootlyUser
from oncall_override.models.slack import (
    BlockSuggestion,
    ModalMetadata,
    SlashCommand,
    ViewClosed,
    ViewSubmission,
)
from oncall_override.overrides import create_override
from oncall_override.rootly.client import get_rootly_client
from oncall_override.rootly.users import list_users, search_users
from oncall_override.slack.messaging import get_user_profile, open_modal
from oncall_override.slack.notifier import notify_requester
from oncall_override.slack.views import (
    DURATION_BLOCK_ID,
    ERROR_OPTION_VALUE,
    MODAL_CALLBACK_ID,
    USER_BLOCK_ID,
    build_error_options_response,
    build_options_response,
    build_override_modal,
)
from oncall_override.tasks import submit

logger = logging.getLogger(__name__)

# "1h <@U123>" or "30m <@U123|alice>"
DIRECT_COMMAND_PATTERN = re.compile(r"^\s*([0-9]+[mhd])\s+<@([A-Z0-9]+)(?:\|[^>]*)?>\s*$")


def parse_command_text(text: str) -> tuple[str, str] | None:
    """Return (duration, slack_user_id) for direct-override text, else None."""
    match = DIRECT_COMMAND_PATTERN.match(text or "")
    if match is None:
        return None
    return match.group(1), match.group(2)


# -- Slash command --


def handle_command(command: SlashCommand, background_tasks: BackgroundTasks) -> Response:
    """Route a slash command to the direct-override or modal path.

    Raises BadRequest for commands this bot does not own.
    """
    settings = get_settings()
    if command.command != settings.slash_command:
        raise BadRequest(f"Unknown command {command.command}")

    parsed = parse_command_text(command.text)
    if parsed is not None:
        duration, slack_user_id = parsed
        logger.info(
            "Direct override for %s (%s) requested by %s",
            slack_user_id,
            duration,
            command.user_id,
        )
        request = OverrideRequest(
            slack_user_id=slack_user_id,
            duration=duration,
            requesting_user_id=command.user_id,
            channel_id=command.channel_id,
        )
        submit(background_tasks, create_override, request)
        return Response(status_code=200)

    if not command.trigger_id:
        raise BadRequest("Missing trigger_id")

    metadata = ModalMetadata(
        channel_id=command.channel_id,
        requesting_user_id=command.user_id,
        response_url=command.response_url,
    )
    submit(background_tasks, open_override_modal, command.trigger_id, metadata)
    return Response(status_code=200)


async def _find_requesting_user(slack_user_id: str) -> RootlyUser | None:
    """Best-effort lookup of the requester in Rootly, for pre-selection."""
    try:
        profile = await get_user_profile(slack_user_id)
        if profile is None:
            return None
        return await get_rootly_client().find_user_by_email(profile.email)
    except Exception:
        logger.info(
            "Could not pre-populate current user, continuing with empty dropdown",
            exc_info=True,
        )
        return None


async def open_override_modal(trigger_id: str, metadata: ModalMetadata) -> None:
    """Open the override modal, pre-selecting the requester when they are in Rootly."""
    try:
        initial_user = await _find_requesting_user(metadata.requesting_user_id)
        await open_modal(trigger_id, build_override_modal(metadata, initial_user))
    except Exception as exc:
        logger.error("Error opening modal: %s", exc, exc_info=True)
        await notify_requester(
            metadata.channel_id,
            metadata.requesting_user_id,
            f"❌ Could not open modal: {exc}",
        )


# -- Interactions --


def validate_submission(submission: ViewSubmission) -> dict[str, str]:
    """Return field errors keyed by block_id; empty when the submission is valid."""
    errors: dict[str, str] = {}

    selected = submission.selected_user_id
    if not selected or selected == ERROR_OPTION_VALUE:
        errors[USER_BLOCK_ID] = "Please select a valid Rootly user"

    message = duration_error(submission.duration_text)
    if message is not None:
        errors[DURATION_BLOCK_ID] = message

    return errors


def handle_view_submission(
    submission: ViewSubmission, background_tasks: BackgroundTasks
) -> Response:
    """Validate the modal; answer with errors or schedule the override."""
    if submission.view.callback_id and submission.view.callback_id != MODAL_CALLBACK_ID:
        raise BadRequest(f"Unhandled view {submission.view.callback_id}")

    errors = validate_submission(submission)
    if errors:
        logger.info("Modal submission from %s rejected: %s", submission.user.id, errors)
        return JSONResponse({"response_action": "errors", "errors": errors})

    try:
        metadata = submission.metadata()
    except ValidationError as exc:
        raise BadRequest("Malformed private_metadata") from exc

    request = OverrideRequest(
        rootly_user_id=submission.selected_user_id,
        duration=submission.duration_text,
        requesting_user_id=metadata.requesting_user_id,
        channel_id=metadata.channel_id,
    )
    logger.info(
        "Modal override for Rootly user %s (%s) submitted by %s",
        request.rootly_user_id,
        request.duration,
        submission.user.id,
    )
    submit(background_tasks, create_override, request)
    return Response(status_code=200)


def handle_view_closed(closed: ViewClosed) -> Response:
    """The user cancelled the modal. Nothing to do beyond noting it."""
    logger.info("Modal cancelled by user %s", closed.user.id)
    return Response(status_code=200)


async def load_user_options(query: str | None) -> dict:
    """Build select options from the cached Rootly directory, filtered by query."""
    try:
        users = await list_users()
    except Exception:
        logger.error("Error loading user select options", exc_info=True)
        return build_error_options_response()
    return build_options_response(search_users(users, query))


async def handle_block_suggestion(suggestion: BlockSuggestion) -> JSONResponse:
    """Answer an external select's options request inline."""
    return JSONResponse(await load_user_options(suggestion.value))


async def handle_interaction(
    payload: ViewSubmission | ViewClosed | BlockSuggestion,
    background_tasks: BackgroundTasks,
) -> Response:
    """Dispatch a decoded interaction payload on its type."""
    if isinstance(payload, ViewSubmission):
        return handle_view_submission(payload, background_tasks)
    if isinstance(payload, ViewClosed):
        return handle_view_closed(payload)
    if isinstance(payload, BlockSuggestion):
        return await handle_block_suggestion(payload)
    raise BadRequest("Unhandled interaction type")
