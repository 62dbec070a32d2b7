"""
Core security module: verification of hosted-auth access tokens.

Sign-up, login and refresh happen at the hosted auth provider. This
service only verifies the bearer JWTs it issues (HS256 with the
project's JWT secret, audience ``authenticated``) and reads the user id
from the ``sub`` claim.
"""

import logging
from datetime import datetime, timedelta, timezone

import jwt
from fastapi import HTTPException, status

from kundapay.config import settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Key configuration
# ---------------------------------------------------------------------------

_secret: str | bytes = settings.AUTH_JWT_SECRET
_algorithm: str = settings.AUTH_JWT_ALGORITHM
_audience: str = settings.AUTH_JWT_AUDIENCE


def configure_keys(*, secret: str | bytes, algorithm: str = "HS256") -> None:
    """Override the verification key at runtime (used in tests)."""
    global _secret, _algorithm
    _secret = secret
    _algorithm = algorithm


# ---------------------------------------------------------------------------
# Token creation (dev tooling and tests; production tokens come from the provider)
# ---------------------------------------------------------------------------


def create_access_token(user_id: str, email: str, expires_minutes: int = 60) -> str:
    """Create an access JWT shaped like the auth provider's."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "aud": _audience,
        "role": "authenticated",
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, _secret, algorithm=_algorithm)


# ---------------------------------------------------------------------------
# Token verification
# ---------------------------------------------------------------------------


def decode_token(token: str) -> dict:
    """
    Decode and return the JWT payload.

    Raises HTTP 401 on expiry or any other invalid-token error.
    """
    try:
        return jwt.decode(token, _secret, algorithms=[_algorithm], audience=_audience)
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )
