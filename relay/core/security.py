"""Identity tokens: JWTs whose subject is the caller's identity hex."""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from relay.core.config import settings
from relay.core.identity import Identity


def create_access_token(identity: Identity) -> str:
    """Create a JWT access token with sub (identity hex), iat and exp."""
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": identity.to_hex(),
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )


def identity_from_token(token: str) -> Identity:
    """
    Return the identity a token was issued for.
    Raises jwt.PyJWTError for a bad token and IdentityError for a bad subject.
    """
    payload = decode_access_token(token)
    return Identity.from_hex(str(payload.get("sub") or ""))
