"""Slack request signature verification.

Slack signs every request with ``v0=<hex HMAC-SHA256>`` over
``v0:<timestamp>:<raw body>`` using the app's signing secret.
"""

import hashlib
import hmac
import logging
import time

_logger = logging.getLogger(__name__)

SIGNATURE_VERSION = "v0"
TIMESTAMP_TOLERANCE_SECONDS = 300


def compute_signature(secret: str, timestamp: str, body: bytes) -> str:
    """Return the expected ``v0=`` signature for a request."""
    base = f"{SIGNATURE_VERSION}:{timestamp}:".encode() + body
    digest = hmac.new(secret.encode("utf-8"), base, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_slack_signature(
    secret: str,
    timestamp: str | None,
    signature: str | None,
    body: bytes | None,
    now: float | None = None,
) -> bool:
    """Return true when the request is authentic and fresh."""
    if not secret:
        _logger.warning("Slack signing secret not configured, rejecting request")
        return False
    if not timestamp or not signature or body is None:
        _logger.warning("Slack request missing signature headers or body")
        return False
    if not (timestamp.isascii() and timestamp.removeprefix("-").isdigit()):
        _logger.warning("Slack request timestamp is not an integer")
        return False
    issued_at = int(timestamp)
    current = time.time() if now is None else now
    if abs(current - issued_at) > TIMESTAMP_TOLERANCE_SECONDS:
        _logger.warning("Slack request timestamp outside replay window: %s", issued_at)
        return False
    expected = compute_signature(secret, timestamp, body).encode("utf-8")
    received = signature.encode("utf-8")
    if len(received) != len(expected) or not hmac.compare_digest(received, expected):
        _logger.warning("Slack request signature mismatch")
        return False
    return True
