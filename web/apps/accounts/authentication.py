"""Bearer-token authentication producing an explicit ``Principal``.

``authenticate_token`` is the identity collaborator used by every protected
route: it verifies the token and re-reads the user record on each call, so
deleted users lose access immediately and role changes take effect on the
next request. Nothing is cached between requests.

``BearerTokenAuthentication`` plugs it into DRF; ``request.user`` is then a
``Principal`` (or ``None`` for anonymous requests) that views pass
explicitly into services.
"""

import uuid
from dataclasses import dataclass

from rest_framework import authentication, exceptions

from apps.common.errors import Unauthenticated

from .models import User
from .tokens import decode_token


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, resolved from the live user record.

    Attributes:
        id: User primary key.
        code: Sequential customer code.
        name: Display name (used in notifications).
        email: Contact email (used in notifications).
        role: ``customer`` or ``admin``.
    """

    id: uuid.UUID
    code: int
    name: str
    email: str
    role: str

    # DRF (throttling) expects Django-user-like attributes
    is_authenticated = True

    @property
    def pk(self):
        return self.id

    @property
    def is_admin(self) -> bool:
        return self.role == User.Role.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, code=user.code, name=user.name, email=user.email, role=str(user.role))


def authenticate_token(token: str) -> Principal:
    """Resolve a bearer token into a ``Principal``.

    Raises:
        Unauthenticated: When the token is invalid/expired or the user it
            names no longer exists.
    """
    user_id = decode_token(token)
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise Unauthenticated("User no longer exists", code="USER_NOT_FOUND")
    return Principal.from_user(user)


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """DRF authentication reading ``Authorization: Bearer <token>``."""

    keyword = "Bearer"

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed("Malformed Authorization header", code="invalid_token")

        try:
            token = header[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed("Malformed Authorization header", code="invalid_token")

        try:
            principal = authenticate_token(token)
        except Unauthenticated as e:
            raise exceptions.AuthenticationFailed(e.message, code=e.code.lower())
        return principal, token

    def authenticate_header(self, request):
        return self.keyword
