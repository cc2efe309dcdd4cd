"""Exception types for the override flow.

AuthFailure and BadRequest are turned into HTTP responses by the handlers
registered in app.py. The rest are raised inside background work and end up
as a chat message to the requester.
"""


class OverrideError(Exception):
    """Base class for all override bot errors."""


class AuthFailure(OverrideError):
    """Slack request signature or timestamp did not verify."""


class BadRequest(OverrideError):
    """Malformed payload or a command/interaction this bot does not handle."""


class ConfigurationMissing(OverrideError):
    """A required setting is not configured."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"{setting.upper()} environment variable is not set")


class InvalidDuration(OverrideError):
    """Duration string is not of the form <positive int><m|h|d>."""

    def __init__(self, value: str | None, reason: str = "Use format: 30m, 2h, or 1d"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid duration {value!r}. {reason}")


class UserNotFound(OverrideError):
    """Target user could not be matched to a Rootly user."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Could not find a Rootly user for {reference}")


class UpstreamError(OverrideError):
    """Rootly answered with a non-success status."""

    def __init__(self, status_code: int, body: str, action: str = "request"):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Rootly API error during {action}: {status_code} - {body}")
