import uuid

from django.db import models


class ProductModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Category(models.TextChoices):
        BLOUSE = "blouse"
        SKIRT = "skirt"
        SHORTS = "shorts"
        BIKINI = "bikini"

    name = models.CharField(max_length=120)
    description = models.TextField()
    category = models.CharField(max_length=16, choices=Category.choices, db_index=True)
    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    images = models.JSONField(default=list)
    available = models.BooleanField(default=True, db_index=True)
    # [{"name": ..., "description": ..., "unit": "cm"}, ...] en orden
    required_measurements = models.JSONField(default=list)
    estimated_production_days = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]

    def __str__(self):
        return self.name
