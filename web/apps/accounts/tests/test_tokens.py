"""Token issuing/verification and bearer authentication."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from apps.accounts.authentication import authenticate_token
from apps.accounts.tokens import decode_token, issue_token
from apps.common.errors import Unauthenticated


def test_token_round_trips_user_id():
    uid = uuid.uuid4()
    assert decode_token(issue_token(uid)) == uid


def test_token_carries_no_role_claim(settings):
    payload = jwt.decode(issue_token(uuid.uuid4()), settings.JWT_SECRET, algorithms=["HS256"])
    assert set(payload) == {"id", "iat", "exp"}


def test_expired_token_is_rejected(settings):
    settings.JWT_EXPIRES_SECONDS = 60
    token = issue_token(uuid.uuid4(), now=datetime.now(timezone.utc) - timedelta(hours=1))
    with pytest.raises(Unauthenticated) as ei:
        decode_token(token)
    assert ei.value.code == "TOKEN_EXPIRED"


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"id": str(uuid.uuid4()), "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
                       "another-secret", algorithm="HS256")
    with pytest.raises(Unauthenticated) as ei:
        decode_token(token)
    assert ei.value.code == "INVALID_TOKEN"


@pytest.mark.django_db
def test_authenticate_reads_live_role(customer):
    token = issue_token(customer.id)
    assert authenticate_token(token).role == "customer"

    customer.role = "admin"
    customer.save()
    principal = authenticate_token(token)
    assert principal.role == "admin"
    assert principal.is_admin


@pytest.mark.django_db
def test_deleted_user_loses_access(customer):
    token = issue_token(customer.id)
    customer.delete()
    with pytest.raises(Unauthenticated):
        authenticate_token(token)


@pytest.mark.django_db
def test_api_rejects_bad_token(client):
    r = client.get("/api/orders/meus-pedidos", HTTP_AUTHORIZATION="Bearer not-a-jwt")
    assert r.status_code == 401
    assert r.json()["detail"] == "INVALID_TOKEN"
