"""HTTP views for the product catalog.

Reads are public; every write requires the admin role. Views that serve
both (the collection and the detail URL) only run authentication for
non-GET requests, so a stale token never blocks browsing the catalog.
"""

from pydantic import TypeAdapter
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.permissions import ADMIN_ONLY, require_role
from apps.common.errors import NotFound, ValidationFailed

from .domain import Category
from .repository import ProductRepository
from .schemas import ProductIn, ProductOut

_products_in = TypeAdapter(list[ProductIn])


def _dump(product) -> dict:
    return ProductOut.model_validate(product).model_dump()


class PublicReadMixin:
    def get_authenticators(self):
        # DRF builds authenticators before dispatch; self.request is the Django request here
        if self.request.method in ("GET", "HEAD", "OPTIONS"):
            return []
        return super().get_authenticators()


class ProductCollectionView(PublicReadMixin, APIView):
    def get(self, request):
        products = [_dump(p) for p in ProductRepository().list_available()]
        return Response({"message": "Products retrieved", "count": len(products), "products": products})

    def post(self, request):
        """Create one product, or several when the body is a JSON array.

        Bulk creation validates every item first and stores them in a single
        transaction.
        """
        require_role(request.user, ADMIN_ONLY)
        repo = ProductRepository()
        if isinstance(request.data, list):
            dtos = _products_in.validate_python(request.data)
            products = [_dump(p) for p in repo.create_many(dtos)]
            return Response(
                {"message": "Products created successfully", "count": len(products), "products": products},
                status=status.HTTP_201_CREATED,
            )

        dto = ProductIn.model_validate(request.data)
        product = repo.create(dto)
        return Response(
            {"message": "Product created successfully", "product": _dump(product)},
            status=status.HTTP_201_CREATED,
        )


class ProductsByCategoryView(APIView):
    authentication_classes = []

    def get(self, request, categoria: str):
        try:
            category = Category(categoria.strip().lower())
        except ValueError:
            raise ValidationFailed(
                "Invalid category",
                code="INVALID_CATEGORY",
                valid_categories=[c.value for c in Category],
            )
        products = [_dump(p) for p in ProductRepository().list_available(category)]
        return Response({"message": "Products retrieved", "count": len(products), "products": products})


class ProductDetailView(PublicReadMixin, APIView):
    def get(self, request, product_id):
        product = ProductRepository().get(product_id)
        if product is None:
            raise NotFound("Product not found", code="PRODUCT_NOT_FOUND")
        return Response({"message": "Product retrieved", "product": _dump(product)})

    def put(self, request, product_id):
        require_role(request.user, ADMIN_ONLY)
        dto = ProductIn.model_validate(request.data)
        product = ProductRepository().replace(product_id, dto)
        if product is None:
            raise NotFound("Product not found", code="PRODUCT_NOT_FOUND")
        return Response({"message": "Product updated successfully", "product": _dump(product)})

    def delete(self, request, product_id):
        require_role(request.user, ADMIN_ONLY)
        if not ProductRepository().delete(product_id):
            raise NotFound("Product not found", code="PRODUCT_NOT_FOUND")
        return Response({"message": "Product deleted successfully"})


class ProductAvailabilityView(APIView):
    def patch(self, request, product_id):
        require_role(request.user, ADMIN_ONLY)
        product = ProductRepository().toggle_availability(product_id)
        if product is None:
            raise NotFound("Product not found", code="PRODUCT_NOT_FOUND")
        state = "available" if product.available else "unavailable"
        return Response({"message": f"Product marked as {state}", "product": _dump(product)})
