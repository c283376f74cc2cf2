"""Pydantic schemas for orders.

Request schemas only check shape; measurement values are passed through
untouched (``Any``) so the measurement validator can report a bad value with
its own error code instead of a generic validation error.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from apps.catalog.domain import Category

from .domain import OrderStatus


class MeasurementIn(BaseModel):
    """Input schema for one supplied measurement.

    Attributes:
        name: Measurement name, matched case-insensitively against the
            product's required measurements.
        value: Raw value; must be a positive number (checked later).
        unit: Optional unit, ``cm`` when omitted.
    """

    name: str = Field(min_length=1, max_length=60)
    value: Any = None
    unit: Optional[str] = Field(default=None, max_length=10)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("Measurement name cannot be blank")
        return v2


class CreateOrderDTO(BaseModel):
    """Schema for creating an order.

    Attributes:
        product_id: Product being ordered.
        measurements: At least one measurement.
        notes: Optional free text for the maker.
    """

    product_id: uuid.UUID
    measurements: list[MeasurementIn] = Field(min_length=1)
    notes: str = Field(default="", max_length=2000)


class TransitionDTO(BaseModel):
    status: str = Field(min_length=1)
    comment: Optional[str] = Field(default=None, max_length=500)

    @field_validator("status")
    @classmethod
    def normalize_status(cls, v: str) -> str:
        return v.strip().lower()


class MeasurementOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    value: Any
    unit: str


class StatusChangeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    status: OrderStatus
    timestamp: datetime
    comment: Optional[str] = None


class OrderOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: uuid.UUID
    number: int
    user_id: uuid.UUID
    product_id: uuid.UUID
    measurements: list[MeasurementOut]
    status: OrderStatus
    total_price: Decimal
    notes: str
    projected_delivery: Optional[datetime] = None
    status_history: list[StatusChangeOut]
    created_at: Optional[datetime] = None


class CustomerContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    code: int
    name: str
    email: str
    phone: str


class ProductSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: uuid.UUID
    name: str
    category: Category
    images: list[str]
    estimated_production_days: int
