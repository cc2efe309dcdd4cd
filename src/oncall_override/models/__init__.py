"""Data models for the override bot."""

from oncall_override.models.override import (
    Duration,
    DurationUnit,
    OverrideRequest,
    OverrideResult,
    TimeWindow,
)
from oncall_override.models.rootly import RootlyUser
from oncall_override.models.slack import (
    BlockSuggestion,
    ModalMetadata,
    SelectOption,
    SlackProfile,
    SlashCommand,
    ViewClosed,
    ViewSubmission,
    decode_interaction,
)

__all__ = [
    "BlockSuggestion",
    "Duration",
    "DurationUnit",
    "ModalMetadata",
    "OverrideRequest",
    "OverrideResult",
    "RootlyUser",
    "SelectOption",
    "SlackProfile",
    "SlashCommand",
    "TimeWindow",
    "ViewClosed",
    "ViewSubmission",
    "decode_interaction",
]
