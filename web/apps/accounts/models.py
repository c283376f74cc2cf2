import uuid

from django.db import models


class User(models.Model):
    # UUID PK expuesto en API (y en el token)
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Código secuencial del cliente, asignado una sola vez
    code = models.BigIntegerField(unique=True, editable=False)

    class Role(models.TextChoices):
        CUSTOMER = "customer"
        ADMIN = "admin"

    name = models.CharField(max_length=120)
    email = models.EmailField(max_length=254, unique=True)  # siempre en minúsculas
    password = models.CharField(max_length=128)
    role = models.CharField(max_length=16, choices=Role.choices, default=Role.CUSTOMER)
    phone = models.CharField(max_length=32)
    address = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "users"
        ordering = ["code"]

    def __str__(self):
        return f"#{self.code} {self.email}"
