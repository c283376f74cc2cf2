"""Catalog domain values.

Plain dataclasses describing products as the rest of the system sees them
(the order lifecycle reads ``Product`` snapshots through its catalog port).
Defaults are applied by the factory functions, not by field metadata.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List

DEFAULT_UNIT = "cm"


class Category(str, Enum):
    BLOUSE = "blouse"
    SKIRT = "skirt"
    SHORTS = "shorts"
    BIKINI = "bikini"


@dataclass(frozen=True)
class MeasurementSpec:
    """A measurement the customer must supply for a product.

    Attributes:
        name: Measurement name (compared case-insensitively).
        description: How to take the measurement.
        unit: Unit of the expected value.
    """

    name: str
    description: str
    unit: str


def measurement_spec(name: str, description: str, unit: str | None = None) -> MeasurementSpec:
    """Build a ``MeasurementSpec``, defaulting the unit to centimetres."""
    return MeasurementSpec(name=name.strip(), description=description.strip(), unit=(unit or DEFAULT_UNIT).strip())


@dataclass
class Product:
    id: uuid.UUID
    name: str
    description: str
    category: Category
    base_price: Decimal
    estimated_production_days: int
    required_measurements: List[MeasurementSpec] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    available: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
