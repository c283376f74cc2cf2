"""Signed, time-limited bearer tokens (JWT, HS256).

Tokens only carry the user identifier (``id``) plus ``iat``/``exp``. Roles
are never read from the token: the authentication layer re-fetches the user
on every request.
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
from django.conf import settings

from apps.common.errors import Unauthenticated


def issue_token(user_id: uuid.UUID, now: datetime | None = None) -> str:
    """Sign a token for ``user_id`` valid for ``JWT_EXPIRES_SECONDS``."""
    issued = now or datetime.now(timezone.utc)
    payload = {
        "id": str(user_id),
        "iat": issued,
        "exp": issued + timedelta(seconds=settings.JWT_EXPIRES_SECONDS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> uuid.UUID:
    """Verify ``token`` and return the user id it encodes.

    Raises:
        Unauthenticated: With code ``TOKEN_EXPIRED`` for expired tokens and
            ``INVALID_TOKEN`` for anything that fails verification.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "id"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise Unauthenticated("Token expired", code="TOKEN_EXPIRED") from e
    except jwt.InvalidTokenError as e:
        raise Unauthenticated("Invalid token", code="INVALID_TOKEN") from e

    try:
        return uuid.UUID(str(payload["id"]))
    except ValueError as e:
        raise Unauthenticated("Invalid token", code="INVALID_TOKEN") from e
