"""Slack request signature verification as a FastAPI dependency."""

import logging

from fastapi import Request
from slack_sdk.signature import Clock, SignatureVerifier

from oncall_override.config import get_settings
from oncall_override.errors import AuthFailure

logger = logging.getLogger(__name__)

TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_HEADER = "X-Slack-Signature"


class _FixedClock(Clock):
    def __init__(self, now: float):
        self._now = now

    def now(self) -> float:
        return self._now


def is_valid_request(
    body: bytes | str,
    timestamp: str | None,
    signature: str | None,
    signing_secret: str,
    now: float | None = None,
) -> bool:
    """Check a Slack v0 signature over body.

    Fails when the secret is unset, a header is missing, the timestamp is not
    an integer or is more than five minutes from now, or the HMAC-SHA256
    digest does not match. The digest comparison is constant-time.
    """
    if not signing_secret:
        logger.error("SLACK_SIGNING_SECRET is not set")
        return False
    if not timestamp or not signature:
        return False
    try:
        int(timestamp)
    except ValueError:
        return False

    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    verifier = SignatureVerifier(
        signing_secret=signing_secret,
        clock=Clock() if now is None else _FixedClock(now),
    )
    return verifier.is_valid(body=body, timestamp=timestamp, signature=signature)


async def verify_slack_request(request: Request) -> bytes:
    """Verify the Slack signature and return the raw request body.

    Reads the raw body FIRST (before any form parsing) so verification uses
    the exact bytes Slack signed.

    Raises AuthFailure (401) if the signature is invalid.
    """
    settings = get_settings()
    body = await request.body()

    if not is_valid_request(
        body,
        request.headers.get(TIMESTAMP_HEADER),
        request.headers.get(SIGNATURE_HEADER),
        settings.slack_signing_secret,
    ):
        logger.warning("Rejected Slack request to %s: bad signature", request.url.path)
        raise AuthFailure("Signature verification failed")

    return body
