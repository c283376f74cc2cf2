"""The DRF exception handler renders every error with the same envelope."""

import pytest
from pydantic import BaseModel, ValidationError
from rest_framework import exceptions

from apps.common.errors import InvalidMeasurementValue, MissingMeasurements, NotFound
from apps.common.exceptions import api_exception_handler


class _Payload(BaseModel):
    quantity: int


def test_domain_error_uses_its_code_and_status():
    resp = api_exception_handler(NotFound("Order not found", code="ORDER_NOT_FOUND"), {})
    assert resp.status_code == 404
    assert resp.data == {"detail": "ORDER_NOT_FOUND", "message": "Order not found"}


def test_domain_error_extras_are_merged_into_body():
    resp = api_exception_handler(MissingMeasurements(["bust"]), {})
    assert resp.status_code == 400
    assert resp.data["detail"] == "MISSING_MEASUREMENTS"
    assert resp.data["missing"] == ["bust"]

    resp = api_exception_handler(InvalidMeasurementValue("waist", 250), {})
    assert resp.data["measurement"] == "waist"
    assert resp.data["value"] == 250


def test_pydantic_errors_become_validation_error():
    with pytest.raises(ValidationError) as ei:
        _Payload.model_validate({"quantity": "many"})
    resp = api_exception_handler(ei.value, {})
    assert resp.status_code == 400
    assert resp.data["detail"] == "VALIDATION_ERROR"
    assert resp.data["errors"][0]["loc"] == ["quantity"]


def test_drf_errors_keep_status_and_get_upper_code():
    resp = api_exception_handler(exceptions.AuthenticationFailed("Invalid token", code="invalid_token"), {})
    assert resp.status_code == 401
    assert resp.data == {"detail": "INVALID_TOKEN", "message": "Invalid token"}


def test_unexpected_error_is_500_without_detail_outside_debug(settings):
    settings.DEBUG = False
    resp = api_exception_handler(RuntimeError("db exploded"), {})
    assert resp.status_code == 500
    assert resp.data == {"detail": "INTERNAL_ERROR", "message": "Something went wrong"}


def test_unexpected_error_includes_detail_in_debug(settings):
    settings.DEBUG = True
    resp = api_exception_handler(RuntimeError("db exploded"), {})
    assert resp.data["error"] == "db exploded"
