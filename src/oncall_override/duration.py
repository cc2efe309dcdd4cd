"""Duration string parsing and override time window calculation."""

import re
from datetime import datetime, timezone

from oncall_override.errors import InvalidDuration
from oncall_override.models.override import Duration, DurationUnit, TimeWindow

DURATION_PATTERN = re.compile(r"^([0-9]+)([mhd])$")


def parse_duration(text: str | None) -> Duration:
    """Parse strings like "30m", "2h" or "1d".

    Raises InvalidDuration when the string is missing, malformed, or the
    amount is not positive.
    """
    if text is None or not text.strip():
        raise InvalidDuration(text, "Please enter a duration")

    match = DURATION_PATTERN.match(text.strip())
    if match is None:
        raise InvalidDuration(text, "Invalid format. Use: 30m, 2h, or 1d")

    amount = int(match.group(1))
    if amount <= 0:
        raise InvalidDuration(text, "Duration must be a positive number")

    return Duration(amount=amount, unit=DurationUnit(match.group(2)))


def compute_window(duration: Duration, now: datetime | None = None) -> TimeWindow:
    """Return the window starting at now (UTC) and lasting for duration."""
    start = now or datetime.now(timezone.utc)
    try:
        end = start + duration.to_timedelta()
    except OverflowError as exc:
        raise InvalidDuration(str(duration), "Duration is too long") from exc
    return TimeWindow(start=start, end=end)


def duration_error(text: str | None) -> str | None:
    """Return the user-facing validation message for text, or None if it is usable."""
    try:
        compute_window(parse_duration(text))
    except InvalidDuration as exc:
        return exc.reason
    return None
