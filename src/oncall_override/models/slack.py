"""Slack request models.

Slash commands arrive form-encoded; interactions arrive as a JSON string in
the ``payload`` form field. Both are decoded once at the HTTP boundary into
the models below. Interaction payloads form a union tagged on ``type``.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter

from oncall_override.models.rootly import RootlyUser

# Slack rejects option text longer than this
_OPTION_TEXT_LIMIT = 75


class SlashCommand(BaseModel):
    """Fields of a slash command invocation."""

    command: str
    text: str = ""
    user_id: str
    channel_id: str
    trigger_id: str = ""
    response_url: str = ""


class SlackProfile(BaseModel):
    """Email and display name of a Slack user."""

    email: str
    name: str


class ModalMetadata(BaseModel):
    """Round-tripped through the modal's private_metadata."""

    channel_id: str
    requesting_user_id: str
    response_url: str = ""


class SelectOption(BaseModel):
    """One entry of an external select menu."""

    label: str
    value: str

    @classmethod
    def from_user(cls, user: RootlyUser) -> "SelectOption":
        return cls(label=f"{user.name} ({user.email})", value=user.id)

    def to_slack(self) -> dict:
        return {
            "text": {"type": "plain_text", "text": self.label[:_OPTION_TEXT_LIMIT]},
            "value": self.value,
        }


# -- Interaction payloads --


class SlackUserRef(BaseModel):
    id: str


class SelectedOption(BaseModel):
    value: str


class StateValue(BaseModel):
    """A single input's state: text inputs set value, selects set selected_option."""

    type: str | None = None
    value: str | None = None
    selected_option: SelectedOption | None = None


class ViewState(BaseModel):
    values: dict[str, dict[str, StateValue]] = {}

    def input_value(self, block_id: str, action_id: str) -> StateValue | None:
        return self.values.get(block_id, {}).get(action_id)


class SubmittedView(BaseModel):
    id: str = ""
    callback_id: str = ""
    private_metadata: str = ""
    state: ViewState = ViewState()


class ViewSubmission(BaseModel):
    """The user pressed the modal's submit button."""

    type: Literal["view_submission"]
    user: SlackUserRef
    view: SubmittedView

    @property
    def selected_user_id(self) -> str | None:
        state = self.view.state.input_value("user_block", "user_select")
        if state is None or state.selected_option is None:
            return None
        return state.selected_option.value

    @property
    def duration_text(self) -> str:
        state = self.view.state.input_value("duration_block", "duration_input")
        if state is None or state.value is None:
            return ""
        return state.value.strip()

    def metadata(self) -> ModalMetadata:
        return ModalMetadata.model_validate_json(self.view.private_metadata)


class ViewClosed(BaseModel):
    """The user dismissed the modal."""

    type: Literal["view_closed"]
    user: SlackUserRef
    is_cleared: bool = False


class BlockSuggestion(BaseModel):
    """An external select asks for options matching what the user typed."""

    type: Literal["block_suggestion"]
    user: SlackUserRef
    action_id: str = ""
    block_id: str = ""
    value: str = ""


InteractionPayload = Annotated[
    ViewSubmission | ViewClosed | BlockSuggestion,
    Field(discriminator="type"),
]

_interaction_adapter: TypeAdapter[InteractionPayload] = TypeAdapter(InteractionPayload)


def decode_interaction(raw: str) -> ViewSubmission | ViewClosed | BlockSuggestion:
    """Parse the JSON ``payload`` field into its interaction model.

    Raises pydantic.ValidationError for malformed JSON, unknown types, or
    missing fields.
    """
    return _interaction_adapter.validate_json(raw)
