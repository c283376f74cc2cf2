"""Repository layer for persisting orders.

``DjangoOrderStore`` implements the ``OrderStore`` port on top of
``OrderModel`` and ``DjangoProductCatalog`` exposes the catalog repository
through the ``ProductCatalog`` port. Both return domain values, never ORM
objects, so ``OrderLifecycleService`` stays decoupled from Django.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.db.models import F, Max
from django.utils import timezone

from apps.catalog.domain import Product
from apps.catalog.repository import ProductRepository
from apps.common.sequences import next_value

from .domain import DuplicateOrderNumber, Order, OrderStatus, StatusChange, measurement
from .models import OrderModel

ORDER_NUMBER_SEQUENCE = "orders.number"


def _history_payload(history: List[StatusChange]) -> list[dict]:
    return [
        {"status": h.status.value, "timestamp": h.timestamp.isoformat(), "comment": h.comment}
        for h in history
    ]


def _to_domain(obj: OrderModel) -> Order:
    return Order(
        id=obj.id,
        number=obj.number,
        user_id=obj.user_id,
        product_id=obj.product_id,
        measurements=[measurement(m["name"], m["value"], m.get("unit")) for m in obj.measurements],
        status=OrderStatus(obj.status),
        total_price=obj.total_price,
        notes=obj.notes,
        projected_delivery=obj.projected_delivery,
        status_history=[
            StatusChange(OrderStatus(h["status"]), datetime.fromisoformat(h["timestamp"]), h.get("comment"))
            for h in obj.status_history
        ],
        created_at=obj.created_at,
        version=obj.version,
    )


def _max_number() -> int:
    return OrderModel.objects.aggregate(m=Max("number"))["m"] or 0


class DjangoOrderStore:
    """Order persistence using the Django ORM."""

    def next_number(self) -> int:
        return next_value(ORDER_NUMBER_SEQUENCE, seed=_max_number)

    def add(self, order: Order) -> None:
        """Insert ``order`` as one row.

        Raises:
            DuplicateOrderNumber: When the unique ``number`` is already used.
        """
        try:
            with transaction.atomic():
                OrderModel.objects.create(
                    id=order.id,
                    number=order.number,
                    user_id=order.user_id,
                    product_id=order.product_id,
                    measurements=[{"name": m.name, "value": m.value, "unit": m.unit} for m in order.measurements],
                    status=order.status.value,
                    total_price=order.total_price,
                    notes=order.notes,
                    projected_delivery=order.projected_delivery,
                    status_history=_history_payload(order.status_history),
                    version=order.version,
                    created_at=order.created_at,
                )
        except IntegrityError as e:
            raise DuplicateOrderNumber(order.number) from e

    def get(self, order_id: uuid.UUID) -> Optional[Order]:
        obj = OrderModel.objects.filter(id=order_id).first()
        return _to_domain(obj) if obj else None

    def list_by_user(self, user_id: uuid.UUID) -> List[Order]:
        return [_to_domain(o) for o in OrderModel.objects.filter(user_id=user_id).order_by("-created_at", "-number")]

    def count_all(self) -> int:
        return OrderModel.objects.count()

    def list_page(self, offset: int, limit: int) -> List[Order]:
        # sliced queryset: LIMIT/OFFSET in SQL
        qs = OrderModel.objects.order_by("-created_at", "-number")[offset : offset + limit]
        return [_to_domain(o) for o in qs]

    def save_transition(self, order: Order, expected_version: int) -> bool:
        # single conditional UPDATE: compare-and-swap on version
        updated = OrderModel.objects.filter(id=order.id, version=expected_version).update(
            status=order.status.value,
            status_history=_history_payload(order.status_history),
            projected_delivery=order.projected_delivery,
            version=F("version") + 1,
            updated_at=timezone.now(),
        )
        if updated:
            order.version = expected_version + 1
        return bool(updated)


class DjangoProductCatalog:
    def __init__(self, repo: ProductRepository | None = None):
        self.repo = repo or ProductRepository()

    def get(self, product_id: uuid.UUID) -> Optional[Product]:
        return self.repo.get(product_id)
