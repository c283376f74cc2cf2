from django.urls import path

from .views import (
    ProductAvailabilityView,
    ProductCollectionView,
    ProductDetailView,
    ProductsByCategoryView,
)

app_name = "catalog"

urlpatterns = [
    path("", ProductCollectionView.as_view(), name="products-collection"),  # GET list / POST create
    path("/categoria/<str:categoria>", ProductsByCategoryView.as_view(), name="products-by-category"),
    path("/<uuid:product_id>", ProductDetailView.as_view(), name="products-detail"),
    path("/<uuid:product_id>/disponibilidade", ProductAvailabilityView.as_view(), name="products-availability"),
]
