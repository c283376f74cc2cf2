"""Repository layer for products.

Maps between ``ProductModel`` rows and ``apps.catalog.domain.Product``
values so callers (views, the order lifecycle) never handle ORM objects.
"""

import logging
import uuid
from typing import List, Optional

from django.db import transaction

from .domain import Category, MeasurementSpec, Product, measurement_spec
from .models import ProductModel
from .schemas import ProductIn

logger = logging.getLogger(__name__)


def _to_domain(obj: ProductModel) -> Product:
    return Product(
        id=obj.id,
        name=obj.name,
        description=obj.description,
        category=Category(obj.category),
        base_price=obj.base_price,
        estimated_production_days=obj.estimated_production_days,
        required_measurements=[
            measurement_spec(m["name"], m.get("description", ""), m.get("unit")) for m in obj.required_measurements
        ],
        images=list(obj.images or []),
        available=obj.available,
        created_at=obj.created_at,
        updated_at=obj.updated_at,
    )


def _specs_payload(specs: List[MeasurementSpec]) -> list[dict]:
    return [{"name": s.name, "description": s.description, "unit": s.unit} for s in specs]


def _fields_from(dto: ProductIn) -> dict:
    specs = [measurement_spec(m.name, m.description, m.unit) for m in dto.required_measurements]
    return {
        "name": dto.name,
        "description": dto.description,
        "category": dto.category.value,
        "base_price": dto.base_price,
        "images": list(dto.images),
        "required_measurements": _specs_payload(specs),
        "estimated_production_days": dto.estimated_production_days,
    }


class ProductRepository:
    """Persist and query products using the Django ORM."""

    def get(self, product_id: uuid.UUID) -> Optional[Product]:
        obj = ProductModel.objects.filter(id=product_id).first()
        return _to_domain(obj) if obj else None

    def get_many(self, product_ids) -> dict[uuid.UUID, Product]:
        return {obj.id: _to_domain(obj) for obj in ProductModel.objects.filter(id__in=set(product_ids))}

    def list_available(self, category: Category | None = None) -> List[Product]:
        qs = ProductModel.objects.filter(available=True)
        if category is not None:
            qs = qs.filter(category=category.value)
        return [_to_domain(o) for o in qs]

    def create(self, dto: ProductIn) -> Product:
        obj = ProductModel.objects.create(
            available=True if dto.available is None else dto.available,
            **_fields_from(dto),
        )
        logger.info("product created", extra={"product_id": str(obj.id)})
        return _to_domain(obj)

    def create_many(self, dtos: List[ProductIn]) -> List[Product]:
        """Insert several products; either all are stored or none."""
        with transaction.atomic():
            return [self.create(dto) for dto in dtos]

    def replace(self, product_id: uuid.UUID, dto: ProductIn) -> Optional[Product]:
        fields = _fields_from(dto)
        if dto.available is not None:
            fields["available"] = dto.available
        with transaction.atomic():
            obj = ProductModel.objects.select_for_update().filter(id=product_id).first()
            if obj is None:
                return None
            for key, value in fields.items():
                setattr(obj, key, value)
            obj.save()
        return _to_domain(obj)

    def delete(self, product_id: uuid.UUID) -> bool:
        deleted, _ = ProductModel.objects.filter(id=product_id).delete()
        return deleted > 0

    def toggle_availability(self, product_id: uuid.UUID) -> Optional[Product]:
        """Flip ``available`` under a row lock and return the new state."""
        with transaction.atomic():
            obj = ProductModel.objects.select_for_update().filter(id=product_id).first()
            if obj is None:
                return None
            obj.available = not obj.available
            obj.save(update_fields=["available", "updated_at"])
        logger.info("product availability toggled", extra={"product_id": str(obj.id), "available": obj.available})
        return _to_domain(obj)
