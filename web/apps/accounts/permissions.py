"""Role checks as plain functions over an explicit principal."""

from typing import Iterable, Optional

from apps.common.errors import Forbidden, Unauthenticated

from .authentication import Principal
from .models import User

ADMIN_ONLY = frozenset({User.Role.ADMIN.value})
ANY_ROLE = frozenset({User.Role.CUSTOMER.value, User.Role.ADMIN.value})


def require_role(principal: Optional[Principal], allowed_roles: Iterable[str]) -> Principal:
    """Authorize ``principal`` against ``allowed_roles``.

    Args:
        principal: The caller resolved by authentication, or None.
        allowed_roles: Roles allowed to proceed.

    Returns:
        Principal: The same principal, for call-site convenience.

    Raises:
        Unauthenticated: When there is no principal.
        Forbidden: When the principal's role is not allowed.
    """
    if principal is None:
        raise Unauthenticated()
    if principal.role not in set(allowed_roles):
        raise Forbidden()
    return principal


def require_authenticated(principal: Optional[Principal]) -> Principal:
    return require_role(principal, ANY_ROLE)
