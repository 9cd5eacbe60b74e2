"""
Webhook signature check.

GitHub signs every delivery with the App's webhook secret (HMAC-SHA256 over the
raw body). Deliveries with a missing or wrong signature are rejected before
the payload is parsed.
"""

import hashlib
import hmac

import structlog
from fastapi import HTTPException, Request

from src.core.config import config

logger = structlog.get_logger(__name__)


def compute_signature(secret: str, payload: bytes) -> str:
    """The X-Hub-Signature-256 value GitHub sends for a payload."""
    mac = hmac.new(secret.encode(), msg=payload, digestmod=hashlib.sha256)
    return f"sha256={mac.hexdigest()}"


async def verify_github_signature(request: Request) -> bool:
    """
    Router dependency guarding the webhook endpoint.

    Raises:
        HTTPException: 401 when `X-Hub-Signature-256` is absent or does not
            match the body signed with the configured secret.
    """
    received = request.headers.get("X-Hub-Signature-256")
    if not received:
        logger.warning("webhook_signature_missing")
        raise HTTPException(status_code=401, detail="Missing GitHub webhook signature.")

    expected = compute_signature(config.github.webhook_secret, await request.body())

    # Constant-time comparison
    if not hmac.compare_digest(received, expected):
        logger.error("webhook_signature_invalid")
        raise HTTPException(status_code=401, detail="Invalid GitHub webhook signature.")

    logger.debug("webhook_signature_verified")
    return True
