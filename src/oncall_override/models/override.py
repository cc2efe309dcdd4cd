"""Override request, duration and time window models."""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, PositiveInt, model_validator


class DurationUnit(str, Enum):
    """Units accepted in a duration string, keyed by their suffix."""

    MINUTE = "m"
    HOUR = "h"
    DAY = "d"


_UNIT_DELTAS = {
    DurationUnit.MINUTE: timedelta(minutes=1),
    DurationUnit.HOUR: timedelta(hours=1),
    DurationUnit.DAY: timedelta(days=1),
}


class Duration(BaseModel):
    """A parsed duration such as 30m, 2h or 1d."""

    amount: PositiveInt
    unit: DurationUnit

    def to_timedelta(self) -> timedelta:
        return self.amount * _UNIT_DELTAS[self.unit]

    def __str__(self) -> str:
        return f"{self.amount}{self.unit.value}"


class TimeWindow(BaseModel):
    """Start and end of an override shift. End is always after start."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _end_after_start(self) -> "TimeWindow":
        if self.end <= self.start:
            raise ValueError("Time window end must be after start")
        return self


class OverrideRequest(BaseModel):
    """Everything needed to create one override, from a command or a modal.

    The target is either a Slack user (direct mention) or a Rootly user id
    picked in the modal. Exactly one of the two is set.
    """

    slack_user_id: str | None = None
    rootly_user_id: str | None = None
    duration: str
    requesting_user_id: str
    channel_id: str

    @model_validator(mode="after")
    def _exactly_one_target(self) -> "OverrideRequest":
        if (self.slack_user_id is None) == (self.rootly_user_id is None):
            raise ValueError("Exactly one of slack_user_id or rootly_user_id is required")
        return self


class OverrideResult(BaseModel):
    """Returned after Rootly accepts an override shift."""

    id: str
