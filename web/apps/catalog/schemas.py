"""Pydantic schemas for catalog requests and responses."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .domain import Category


class MeasurementSpecIn(BaseModel):
    name: str = Field(min_length=1, max_length=60)
    description: str = Field(min_length=1, max_length=300)
    unit: str | None = Field(default=None, max_length=10)


class ProductIn(BaseModel):
    """Schema for creating or fully replacing a product.

    Attributes:
        name: At least 3 characters.
        description: At least 10 characters.
        category: One of ``Category``; matched case-insensitively.
        base_price: Positive price with at most 2 decimal places.
        images: Image references (URLs or storage keys).
        required_measurements: At least one measurement spec, names unique
            ignoring case.
        estimated_production_days: Days of work after confirmation.
        available: Optional; new products default to available, full
            updates keep the current flag when omitted.
    """

    name: str = Field(min_length=3, max_length=120)
    description: str = Field(min_length=10)
    category: Category
    base_price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    images: list[str] = Field(default_factory=list)
    required_measurements: list[MeasurementSpecIn] = Field(min_length=1)
    estimated_production_days: int = Field(ge=1, le=365)
    available: bool | None = None

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("required_measurements")
    @classmethod
    def unique_measurement_names(cls, v: list[MeasurementSpecIn]) -> list[MeasurementSpecIn]:
        seen = set()
        for spec in v:
            key = spec.name.strip().lower()
            if key in seen:
                raise ValueError(f"Duplicate measurement name: {spec.name}")
            seen.add(key)
        return v


class MeasurementSpecOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str
    unit: str


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: uuid.UUID
    name: str
    description: str
    category: Category
    base_price: Decimal
    images: list[str]
    available: bool
    required_measurements: list[MeasurementSpecOut]
    estimated_production_days: int
    created_at: datetime | None = None
    updated_at: datetime | None = None
