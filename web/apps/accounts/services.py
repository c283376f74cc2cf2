"""Account use cases: registration, login, customer listing, promotion.

Customer codes come from the ``users.code`` sequence (see
``apps.common.sequences``); the unique constraint on ``code`` is kept as a
backstop and a collision is retried with a fresh number.
"""

import logging

from django.contrib.auth.hashers import check_password, make_password
from django.db import IntegrityError, transaction
from django.db.models import Max

from apps.common.errors import Conflict, EmailAlreadyRegistered, NotFound, Unauthenticated
from apps.common.sequences import next_value

from .models import User
from .schemas import LoginDTO, RegisterDTO
from .tokens import issue_token

logger = logging.getLogger(__name__)

USER_CODE_SEQUENCE = "users.code"
MAX_CODE_RETRIES = 5


def _max_code() -> int:
    return User.objects.aggregate(m=Max("code"))["m"] or 0


def _email_taken(email: str) -> bool:
    return User.objects.filter(email__iexact=email).exists()


def register(dto: RegisterDTO) -> tuple[User, str]:
    """Create a customer account and sign a token for it.

    Args:
        dto: Validated registration payload (email already lowercased).

    Returns:
        tuple[User, str]: The persisted user and its bearer token.

    Raises:
        EmailAlreadyRegistered: When the email is in use (nothing persisted).
        Conflict: When no unique code could be assigned after retries.
    """
    if _email_taken(dto.email):
        raise EmailAlreadyRegistered()

    for _ in range(MAX_CODE_RETRIES):
        code = next_value(USER_CODE_SEQUENCE, seed=_max_code)
        try:
            with transaction.atomic():
                user = User.objects.create(
                    code=code,
                    name=dto.name,
                    email=dto.email,
                    password=make_password(dto.password),
                    role=User.Role.CUSTOMER,
                    phone=dto.phone,
                    address=dto.address.model_dump(),
                )
        except IntegrityError:
            # Either a concurrent registration took the email or the code
            if _email_taken(dto.email):
                raise EmailAlreadyRegistered()
            logger.warning("user code collision, retrying", extra={"code": code})
            continue
        logger.info("user registered", extra={"user_id": str(user.id), "code": user.code})
        return user, issue_token(user.id)

    raise Conflict("Could not assign a customer code", code="NUMBERING_CONFLICT")


def login(dto: LoginDTO) -> tuple[User, str]:
    """Verify credentials and sign a new token.

    Raises:
        Unauthenticated: ``INVALID_CREDENTIALS`` for unknown email or wrong
            password (same answer for both).
    """
    user = User.objects.filter(email__iexact=dto.email).first()
    if user is None or not check_password(dto.password, user.password):
        raise Unauthenticated("Invalid email or password", code="INVALID_CREDENTIALS")
    return user, issue_token(user.id)


def list_customers() -> list[User]:
    return list(User.objects.filter(role=User.Role.CUSTOMER).order_by("code"))


def promote_to_admin(email: str) -> User:
    """Grant the admin role to the account registered with ``email``."""
    user = User.objects.filter(email__iexact=email.strip()).first()
    if user is None:
        raise NotFound("User not found", code="USER_NOT_FOUND")
    if user.role != User.Role.ADMIN:
        user.role = User.Role.ADMIN
        user.save(update_fields=["role", "updated_at"])
        logger.info("user promoted to admin", extra={"user_id": str(user.id)})
    return user
