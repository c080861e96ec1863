"""Shared-password login and bearer-token helpers."""

from __future__ import annotations

import hmac
from datetime import datetime, timedelta, timezone

import jwt

from bookings.config import Settings

_ALGORITHM = "HS256"


def check_password(candidate: str, settings: Settings) -> bool:
    """Compare *candidate* with the configured password in constant time.

    Both sides are stripped of surrounding whitespace. Nothing matches while
    the password or the token signing secret is unset.
    """
    expected = settings.BASE_PASSWORD.strip()
    if not expected or not settings.JWT_SECRET:
        return False
    return hmac.compare_digest(candidate.strip().encode("utf-8"), expected.encode("utf-8"))


def issue_token(settings: Settings, now: datetime | None = None) -> str:
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "role": "admin",
        "iat": issued_at,
        "exp": issued_at + timedelta(days=settings.JWT_EXPIRES_DAYS),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=_ALGORITHM)


def verify_token(token: str, settings: Settings) -> dict:
    """Decode *token*; raises ``jwt.PyJWTError`` if it is bad or expired.

    An empty signing secret surfaces as ``jwt.InvalidKeyError``.
    """
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[_ALGORITHM])
