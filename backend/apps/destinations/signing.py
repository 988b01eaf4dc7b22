"""
Outbound webhook signature generation.

HMAC-SHA256 over ``"<timestamp>.<body>"`` so receivers can reject replays
by checking the timestamp as well as the digest.
"""

import hashlib
import hmac
import time

from .constants import WEBHOOK_USER_AGENT

SIGNATURE_VERSION = "v1"


def generate_signature(body: str, secret: str, timestamp: int | None = None) -> tuple[str, int]:
    """
    Sign a webhook body.

    Returns:
        Tuple of (signature, timestamp) where signature is "v1=<hex>"
    """
    if timestamp is None:
        timestamp = int(time.time())

    digest = hmac.new(
        secret.encode("utf-8"),
        f"{timestamp}.{body}".encode(),
        hashlib.sha256,
    ).hexdigest()

    return f"{SIGNATURE_VERSION}={digest}", timestamp


def delivery_headers(body: str, delivery_id: str, secret: str | None = None) -> dict[str, str]:
    """
    Headers attached to every webhook delivery.

    The signature pair is only present when the destination has a secret.
    """
    headers = {
        "Content-Type": "application/json",
        "User-Agent": WEBHOOK_USER_AGENT,
        "X-Webhook-ID": delivery_id,
    }
    if secret:
        signature, timestamp = generate_signature(body, secret)
        headers["X-Webhook-Timestamp"] = str(timestamp)
        headers["X-Webhook-Signature"] = signature
    return headers
