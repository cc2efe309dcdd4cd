"""Block Kit builders for the override modal and its user select menu."""

from datetime import datetime, timezone

from oncall_override.models.rootly import RootlyUser
from oncall_override.models.slack import ModalMetadata, SelectOption

MODAL_CALLBACK_ID = "oncall_override_modal_submit"
USER_BLOCK_ID = "user_block"
USER_ACTION_ID = "user_select"
DURATION_BLOCK_ID = "duration_block"
DURATION_ACTION_ID = "duration_input"

# Placeholder value sent when the user list cannot be loaded
ERROR_OPTION_VALUE = "error"

MAX_OPTIONS = 100


def build_override_modal(
    metadata: ModalMetadata,
    initial_user: RootlyUser | None = None,
    now: datetime | None = None,
) -> dict:
    """Build the "Create On-Call Override" modal view.

    initial_user, when given, is pre-selected in the user menu.
    """
    now = now or datetime.now(timezone.utc)
    ts = int(now.timestamp())
    fallback = now.strftime("%Y-%m-%d %H:%M %Z").strip()

    user_select: dict = {
        "type": "external_select",
        "action_id": USER_ACTION_ID,
        "placeholder": {"type": "plain_text", "text": "Select a user..."},
        "min_query_length": 0,
    }
    if initial_user is not None:
        user_select["initial_option"] = SelectOption.from_user(initial_user).to_slack()

    return {
        "type": "modal",
        "callback_id": MODAL_CALLBACK_ID,
        "title": {"type": "plain_text", "text": "Create On-Call Override"},
        "submit": {"type": "plain_text", "text": "Create Override"},
        "close": {"type": "plain_text", "text": "Cancel"},
        "notify_on_close": True,
        "private_metadata": metadata.model_dump_json(),
        "blocks": [
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": (
                        "Select a Rootly user and specify the override duration.\n\n"
                        "*What happens next:* An override will be created in Rootly "
                        "and a confirmation message will be posted to this channel."
                    ),
                },
            },
            {
                "type": "context",
                "elements": [
                    {
                        "type": "mrkdwn",
                        "text": (
                            f"⏰ Current time: <!date^{ts}^{{time}}|{fallback}> "
                            f"on <!date^{ts}^{{date_short}}|{fallback}>"
                        ),
                    }
                ],
            },
            {
                "type": "input",
                "block_id": USER_BLOCK_ID,
                "label": {"type": "plain_text", "text": "Rootly User"},
                "element": user_select,
            },
            {
                "type": "input",
                "block_id": DURATION_BLOCK_ID,
                "label": {"type": "plain_text", "text": "Duration"},
                "element": {
                    "type": "plain_text_input",
                    "action_id": DURATION_ACTION_ID,
                    "placeholder": {"type": "plain_text", "text": "e.g., 1h, 30m, 2d"},
                },
                "hint": {
                    "type": "plain_text",
                    "text": "Use format: 30m (minutes), 2h (hours), or 1d (days)",
                },
            },
        ],
    }


def build_options_response(users: list[RootlyUser]) -> dict:
    """Options payload for a block_suggestion response, capped at MAX_OPTIONS."""
    return {
        "options": [SelectOption.from_user(u).to_slack() for u in users[:MAX_OPTIONS]]
    }


def build_error_options_response() -> dict:
    """Single placeholder option shown when users could not be loaded."""
    option = SelectOption(label="Error loading users - please try again", value=ERROR_OPTION_VALUE)
    return {"options": [option.to_slack()]}
