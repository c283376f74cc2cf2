from decimal import Decimal

import pytest
from django.contrib.auth.hashers import make_password
from django.core.cache import cache

from apps.accounts.models import User
from apps.accounts.tokens import issue_token
from apps.catalog.models import ProductModel
from apps.common.sequences import next_value


@pytest.fixture(autouse=True)
def use_stubs_for_tests(settings):
    # notificaciones síncronas y sin red en tests
    settings.NOTIFICATIONS_BACKEND = "log"
    settings.NOTIFICATIONS_ASYNC = False
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
    # el throttling guarda contadores en la caché local
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(email="ana@example.com", role=User.Role.CUSTOMER, name="Ana Souza", password="segredo123"):
        return User.objects.create(
            code=next_value("users.code"),
            name=name,
            email=email,
            password=make_password(password),
            role=role,
            phone="11999990000",
            address={
                "street": "Rua das Flores",
                "number": "10",
                "district": "Centro",
                "city": "São Paulo",
                "state": "SP",
                "postal_code": "01000-000",
            },
        )

    return _make


@pytest.fixture
def customer(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", role=User.Role.ADMIN, name="Admin")


@pytest.fixture
def auth():
    """Build test-client kwargs carrying a bearer token for ``user``."""

    def _auth(user):
        return {"HTTP_AUTHORIZATION": f"Bearer {issue_token(user.id)}"}

    return _auth


@pytest.fixture
def make_product(db):
    def _make(name="Blouse A", base_price="50.00", measurements=("bust", "length"), days=5, available=True,
              category="blouse"):
        return ProductModel.objects.create(
            name=name,
            description="Hand made crochet piece",
            category=category,
            base_price=Decimal(base_price),
            images=[],
            available=available,
            required_measurements=[
                {"name": m, "description": f"Measure the {m}", "unit": "cm"} for m in measurements
            ],
            estimated_production_days=days,
        )

    return _make
