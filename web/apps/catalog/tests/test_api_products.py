"""API tests for the product catalog."""

import uuid

import pytest

from apps.catalog.models import ProductModel

PRODUCTS_URL = "/api/products"
DETAIL_URL = "/api/products/{pid}"


def _product(**overrides):
    data = {
        "name": "Saia Rodada",
        "description": "Saia de crochê feita sob medida",
        "category": "Skirt",
        "base_price": "120.00",
        "images": ["saia.jpg"],
        "required_measurements": [
            {"name": "cintura", "description": "Contorno da cintura"},
            {"name": "comprimento", "description": "Da cintura até a barra", "unit": "cm"},
        ],
        "estimated_production_days": 10,
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
def test_list_is_public_and_only_shows_available(client, make_product):
    make_product(name="Visible")
    make_product(name="Hidden", available=False)
    r = client.get(PRODUCTS_URL)
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 1
    assert body["products"][0]["name"] == "Visible"


@pytest.mark.django_db
def test_list_ignores_stale_token(client, make_product):
    make_product()
    r = client.get(PRODUCTS_URL, HTTP_AUTHORIZATION="Bearer expired.or.bad")
    assert r.status_code == 200


@pytest.mark.django_db
def test_list_by_category(client, make_product):
    make_product(name="Top", category="blouse")
    make_product(name="Bottom", category="skirt")
    r = client.get(f"{PRODUCTS_URL}/categoria/skirt")
    assert r.status_code == 200
    assert [p["name"] for p in r.json()["products"]] == ["Bottom"]


@pytest.mark.django_db
def test_unknown_category_is_400(client):
    r = client.get(f"{PRODUCTS_URL}/categoria/hats")
    assert r.status_code == 400
    assert r.json()["detail"] == "INVALID_CATEGORY"


@pytest.mark.django_db
def test_get_one_product(client, make_product):
    p = make_product()
    r = client.get(DETAIL_URL.format(pid=p.id))
    assert r.status_code == 200
    product = r.json()["product"]
    assert product["category"] == "blouse"
    assert [m["name"] for m in product["required_measurements"]] == ["bust", "length"]


@pytest.mark.django_db
def test_get_missing_product_is_404(client):
    r = client.get(DETAIL_URL.format(pid=uuid.uuid4()))
    assert r.status_code == 404
    assert r.json()["detail"] == "PRODUCT_NOT_FOUND"


@pytest.mark.django_db
def test_create_requires_admin(client, customer, auth):
    assert client.post(PRODUCTS_URL, data=_product(), content_type="application/json").status_code == 401
    r = client.post(PRODUCTS_URL, data=_product(), content_type="application/json", **auth(customer))
    assert r.status_code == 403
    assert ProductModel.objects.count() == 0


@pytest.mark.django_db
def test_admin_creates_product_with_default_unit(client, admin, auth):
    r = client.post(PRODUCTS_URL, data=_product(), content_type="application/json", **auth(admin))
    assert r.status_code == 201
    product = r.json()["product"]
    assert product["category"] == "skirt"
    assert product["available"] is True
    assert product["required_measurements"][0]["unit"] == "cm"


@pytest.mark.django_db
def test_bulk_create_is_all_or_nothing(client, admin, auth):
    ok = [_product(name="Saia 1"), _product(name="Saia 2")]
    r = client.post(PRODUCTS_URL, data=ok, content_type="application/json", **auth(admin))
    assert r.status_code == 201
    assert r.json()["count"] == 2

    bad = [_product(name="Saia 3"), _product(name="X")]
    r = client.post(PRODUCTS_URL, data=bad, content_type="application/json", **auth(admin))
    assert r.status_code == 400
    assert ProductModel.objects.count() == 2


@pytest.mark.django_db
def test_create_rejects_duplicate_measurement_names(client, admin, auth):
    data = _product(required_measurements=[
        {"name": "Cintura", "description": "a"},
        {"name": "cintura", "description": "b"},
    ])
    r = client.post(PRODUCTS_URL, data=data, content_type="application/json", **auth(admin))
    assert r.status_code == 400
    assert r.json()["detail"] == "VALIDATION_ERROR"


@pytest.mark.django_db
def test_full_update_keeps_availability_when_omitted(client, admin, auth, make_product):
    p = make_product(available=False)
    r = client.put(DETAIL_URL.format(pid=p.id), data=_product(base_price="99.90"),
                   content_type="application/json", **auth(admin))
    assert r.status_code == 200
    p.refresh_from_db()
    assert str(p.base_price) == "99.90"
    assert p.available is False
    assert p.name == "Saia Rodada"


@pytest.mark.django_db
def test_delete_product(client, admin, auth, make_product):
    p = make_product()
    r = client.delete(DETAIL_URL.format(pid=p.id), **auth(admin))
    assert r.status_code == 200
    assert not ProductModel.objects.filter(id=p.id).exists()
    assert client.delete(DETAIL_URL.format(pid=p.id), **auth(admin)).status_code == 404


@pytest.mark.django_db
def test_toggle_availability(client, admin, auth, make_product):
    p = make_product()
    url = f"{DETAIL_URL.format(pid=p.id)}/disponibilidade"

    r = client.patch(url, **auth(admin))
    assert r.status_code == 200
    assert r.json()["product"]["available"] is False

    r = client.patch(url, **auth(admin))
    assert r.json()["product"]["available"] is True
