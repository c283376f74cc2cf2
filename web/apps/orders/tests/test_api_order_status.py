"""API tests for PATCH /api/orders/<id>/status."""

import pytest
from uuid import uuid4

from apps.orders.models import OrderModel

CREATE_URL = "/api/orders"
STATUS_URL = "/api/orders/{oid}/status"


@pytest.fixture
def order(client, customer, auth, make_product):
    payload = {
        "product_id": str(make_product().id),
        "measurements": [{"name": "bust", "value": 90}, {"name": "length", "value": 60}],
    }
    return client.post(CREATE_URL, data=payload, content_type="application/json", **auth(customer)).json()["order"]


def _patch(client, oid, status, user, auth, comment=None):
    data = {"status": status}
    if comment is not None:
        data["comment"] = comment
    return client.patch(STATUS_URL.format(oid=oid), data=data, content_type="application/json", **auth(user))


@pytest.mark.django_db
def test_customer_cannot_change_status(client, customer, auth, order):
    r = _patch(client, order["id"], "confirmed", customer, auth)
    assert r.status_code == 403
    assert OrderModel.objects.get(id=order["id"]).status == "pending"


@pytest.mark.django_db
def test_admin_walks_full_lifecycle(client, admin, auth, order):
    for status in ["confirmed", "in_production", "shipped", "delivered"]:
        r = _patch(client, order["id"], status, admin, auth, comment=f"now {status}")
        assert r.status_code == 200, r.json()

    row = OrderModel.objects.get(id=order["id"])
    assert row.status == "delivered"
    assert row.version == 5
    assert [h["status"] for h in row.status_history] == [
        "pending", "confirmed", "in_production", "shipped", "delivered",
    ]
    assert row.status_history[-1]["comment"] == "now delivered"
    assert row.projected_delivery is not None


@pytest.mark.django_db
def test_unknown_status_is_400(client, admin, auth, order):
    r = _patch(client, order["id"], "perdido", admin, auth)
    assert r.status_code == 400
    assert r.json()["detail"] == "INVALID_TRANSITION"


@pytest.mark.django_db
def test_strict_mode_rejects_skipping_states(client, admin, auth, order, settings):
    settings.ORDER_STRICT_TRANSITIONS = True
    r = _patch(client, order["id"], "delivered", admin, auth)
    assert r.status_code == 400
    assert r.json()["current"] == "pending"
    assert len(OrderModel.objects.get(id=order["id"]).status_history) == 1


@pytest.mark.django_db
def test_permissive_mode_allows_any_known_status(client, admin, auth, order, settings):
    settings.ORDER_STRICT_TRANSITIONS = False
    assert _patch(client, order["id"], "delivered", admin, auth).status_code == 200
    r = _patch(client, order["id"], "pending", admin, auth)
    assert r.status_code == 200
    assert [h["status"] for h in r.json()["order"]["status_history"]] == ["pending", "delivered", "pending"]


@pytest.mark.django_db
def test_terminal_states_stay_terminal(client, admin, auth, order):
    assert _patch(client, order["id"], "cancelled", admin, auth).status_code == 200
    assert _patch(client, order["id"], "confirmed", admin, auth).status_code == 400


@pytest.mark.django_db
def test_confirm_after_product_deleted_is_404(client, admin, auth, order):
    from apps.catalog.models import ProductModel

    ProductModel.objects.filter(id=order["product_id"]).delete()
    r = _patch(client, order["id"], "confirmed", admin, auth)
    assert r.status_code == 404
    assert r.json()["detail"] == "PRODUCT_NOT_FOUND"


@pytest.mark.django_db
def test_missing_order_is_404(client, admin, auth):
    r = _patch(client, uuid4(), "confirmed", admin, auth)
    assert r.status_code == 404
    assert r.json()["detail"] == "ORDER_NOT_FOUND"
