import uuid

from django.db import models
from django.utils import timezone


class OrderModel(models.Model):
    # UUID PK expuesto en API
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Número secuencial visible para el cliente (ver apps.common.sequences)
    number = models.BigIntegerField(unique=True, editable=False)

    # Referencias por id, sin FK: los pedidos sobreviven a productos borrados
    user_id = models.UUIDField(db_index=True)
    product_id = models.UUIDField(db_index=True)

    class Status(models.TextChoices):
        PENDING = "pending"
        CONFIRMED = "confirmed"
        IN_PRODUCTION = "in_production"
        SHIPPED = "shipped"
        DELIVERED = "delivered"
        CANCELLED = "cancelled"

    measurements = models.JSONField(default=list)  # [{name, value, unit}]
    status = models.CharField(max_length=32, choices=Status.choices, default=Status.PENDING)
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    notes = models.TextField(blank=True, default="")
    projected_delivery = models.DateTimeField(null=True, blank=True)
    status_history = models.JSONField(default=list)  # [{status, timestamp (ISO), comment}]
    version = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "orders"
        ordering = ["-number"]

    def __str__(self):
        return f"Order #{self.number}"
