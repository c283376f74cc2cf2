"""API tests for registration, login and the customer listing."""

import pytest

from apps.accounts.models import User

REGISTER_URL = "/api/auth/register"
LOGIN_URL = "/api/auth/login"
CUSTOMERS_URL = "/api/auth/clientes"


def _payload(email="maria@example.com", **overrides):
    data = {
        "name": "Maria Lima",
        "email": email,
        "password": "segredo123",
        "phone": "11988887777",
        "address": {
            "street": "Rua A",
            "number": "5",
            "district": "Centro",
            "city": "Campinas",
            "state": "SP",
            "postal_code": "13000-000",
        },
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
def test_register_returns_201_with_token_and_profile(client):
    r = client.post(REGISTER_URL, data=_payload(), content_type="application/json")
    assert r.status_code == 201
    body = r.json()
    assert body["token"]
    assert body["user"]["email"] == "maria@example.com"
    assert body["user"]["role"] == "customer"
    assert body["user"]["code"] == 1
    assert "password" not in body["user"]


@pytest.mark.django_db
def test_register_assigns_sequential_codes(client):
    codes = []
    for i in range(3):
        r = client.post(REGISTER_URL, data=_payload(email=f"user{i}@example.com"), content_type="application/json")
        codes.append(r.json()["user"]["code"])
    assert codes == [1, 2, 3]


@pytest.mark.django_db
def test_register_duplicate_email_is_400_and_persists_nothing(client):
    client.post(REGISTER_URL, data=_payload(), content_type="application/json")
    before = User.objects.count()

    # mismo email con otra capitalización
    r = client.post(REGISTER_URL, data=_payload(email="Maria@Example.com"), content_type="application/json")
    assert r.status_code == 400
    assert r.json()["detail"] == "EMAIL_ALREADY_REGISTERED"
    assert User.objects.count() == before


@pytest.mark.django_db
def test_register_validation_error(client):
    r = client.post(REGISTER_URL, data=_payload(password="123"), content_type="application/json")
    assert r.status_code == 400
    assert r.json()["detail"] == "VALIDATION_ERROR"


@pytest.mark.django_db
def test_login_ok(client, customer):
    r = client.post(LOGIN_URL, data={"email": "ANA@example.com", "password": "segredo123"},
                    content_type="application/json")
    assert r.status_code == 200
    assert r.json()["user"]["id"] == str(customer.id)
    assert r.json()["token"]


@pytest.mark.django_db
def test_login_wrong_password(client, customer):
    r = client.post(LOGIN_URL, data={"email": customer.email, "password": "nope"}, content_type="application/json")
    assert r.status_code == 401
    assert r.json()["detail"] == "INVALID_CREDENTIALS"


@pytest.mark.django_db
def test_customers_requires_admin(client, customer, admin, auth):
    assert client.get(CUSTOMERS_URL).status_code == 401
    assert client.get(CUSTOMERS_URL, **auth(customer)).status_code == 403

    r = client.get(CUSTOMERS_URL, **auth(admin))
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 1
    assert body["clients"][0]["email"] == customer.email
