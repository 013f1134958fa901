"""
Session Token Management

Signed, time-bound cookie values proving that a visitor authenticated as
admin or guest for one calendar.
"""
import os
import time
import hmac
import hashlib
import secrets
import base64
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Secret for HMAC signing (must be set in production)
SESSION_SECRET = os.getenv("SESSION_SECRET")
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

_ephemeral_secret: Optional[str] = None


def _get_secret() -> str:
    """
    Resolve the signing secret.

    Raises:
        RuntimeError: If SESSION_SECRET is not configured in production
    """
    global _ephemeral_secret

    if SESSION_SECRET:
        return SESSION_SECRET

    if ENVIRONMENT == "production":
        raise RuntimeError(
            "SESSION_SECRET environment variable must be set in production. "
            "Generate one with: python3 -c 'import secrets; print(secrets.token_urlsafe(32))'"
        )

    if _ephemeral_secret is None:
        # Sessions will not survive a restart
        logger.warning(
            "SESSION_SECRET not set - using a per-process secret. "
            "Set SESSION_SECRET for sessions that survive restarts."
        )
        _ephemeral_secret = secrets.token_urlsafe(32)
    return _ephemeral_secret


def _sign(payload: str) -> str:
    # 32 hex characters (128 bits) of HMAC-SHA256
    return hmac.new(
        _get_secret().encode(),
        payload.encode(),
        hashlib.sha256
    ).hexdigest()[:32]


def issue_session_token(slug: str, role: str, max_age: int, now: Optional[float] = None) -> str:
    """
    Generate a signed session token for one calendar and role.

    The token carries the slug, the role, an absolute expiry timestamp and a
    random nonce, signed with HMAC-SHA256.

    Returns:
        Base64-encoded token string
    """
    issued_at = int(now if now is not None else time.time())
    expires_at = issued_at + max_age
    nonce = secrets.token_urlsafe(12)
    payload = f"{slug}:{role}:{expires_at}:{nonce}"

    full_token = f"{payload}:{_sign(payload)}"
    return base64.urlsafe_b64encode(full_token.encode()).decode()


def validate_session_token(token: Optional[str], slug: str, role: str, now: Optional[float] = None) -> bool:
    """
    Validate a session token for the given calendar and role.

    Checks:
    1. Token can be decoded
    2. Signature is valid (prevents tampering)
    3. Slug and role match (a guest token never grants admin)
    4. Token is not expired

    Returns:
        True if token is valid, False otherwise
    """
    if not token:
        return False

    try:
        decoded = base64.urlsafe_b64decode(token.encode()).decode()

        parts = decoded.split(":")
        if len(parts) != 5:
            return False

        token_slug, token_role, expires_str, nonce, received_signature = parts
        payload = f"{token_slug}:{token_role}:{expires_str}:{nonce}"

        # Constant-time comparison to prevent timing attacks
        if not hmac.compare_digest(received_signature, _sign(payload)):
            return False

        if token_slug != slug or token_role != role:
            return False

        current_time = int(now if now is not None else time.time())
        return int(expires_str) >= current_time

    except (ValueError, UnicodeDecodeError, base64.binascii.Error):
        return False
