"""HTTP views for the orders app.

Views are kept intentionally small: they authorize the caller with
``require_role``, validate requests (via Pydantic), delegate to the domain
service and return an HTTP response. Errors propagate as ``DomainError``
and are rendered by ``apps.common.exceptions.api_exception_handler``.

The views obtain a configured ``OrderLifecycleService`` from
``providers.get_order_service()``; tests patch that function to inject
in-memory ports.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from apps.accounts.models import User
from apps.accounts.permissions import ADMIN_ONLY, require_authenticated, require_role
from apps.catalog.repository import ProductRepository
from apps.common.errors import ValidationFailed

from . import providers
from .domain import Customer, measurement
from .schemas import CreateOrderDTO, CustomerContactOut, OrderOut, ProductSummaryOut, TransitionDTO

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _present(orders, with_customer: bool = False) -> list[dict]:
    """Dump ``orders`` with their product summary and, optionally, the owner's contact.

    Products and owners are fetched with one query each for the whole batch.
    A product deleted after the order was placed shows as ``None``.
    """
    products = ProductRepository().get_many(o.product_id for o in orders)
    owners = {}
    if with_customer:
        owners = {u.id: u for u in User.objects.filter(id__in={o.user_id for o in orders})}

    results = []
    for o in orders:
        item = OrderOut.model_validate(o).model_dump()
        product = products.get(o.product_id)
        item["product"] = ProductSummaryOut.model_validate(product).model_dump() if product else None
        if with_customer:
            owner = owners.get(o.user_id)
            item["customer"] = CustomerContactOut.model_validate(owner).model_dump() if owner else None
        results.append(item)
    return results


def _positive_int(raw, name: str, default: int) -> int:
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationFailed(f"'{name}' must be an integer")
    if value < 1:
        raise ValidationFailed(f"'{name}' must be at least 1")
    return value


class OrdersCollectionView(APIView):
    """List every order (admin) or place a new one (any signed-in user)."""

    throttle_classes = [ScopedRateThrottle]

    def get_throttles(self):
        # DRF evalúa los throttles en initial(), antes de get/post
        self.throttle_scope = "orders_list" if self.request.method == "GET" else "orders_create"
        return [throttle() for throttle in self.throttle_classes]

    def get(self, request):
        """Return a page of all orders with product summary and owner contact.

        Query params ``page`` (default 1, past the end serves the last page)
        and ``page_size`` (default 20, capped at 100).
        """
        require_role(request.user, ADMIN_ONLY)
        page = _positive_int(request.GET.get("page"), "page", 1)
        page_size = min(_positive_int(request.GET.get("page_size"), "page_size", DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE)

        result = providers.get_order_service().page_all(page, page_size)
        return Response(
            {
                "message": "Orders retrieved",
                "count": result.total,
                "page": result.page,
                "page_size": result.page_size,
                "orders": _present(result.orders, with_customer=True),
            }
        )

    def post(self, request):
        """Create a new order for the caller.

        Returns:
            Response: 201 with ``{message, order}``. Errors: 400 for payload,
            measurement or availability problems, 404 for an unknown
            product, 401 without a valid token.
        """
        principal = require_authenticated(request.user)
        dto = CreateOrderDTO.model_validate(request.data)

        customer = Customer(id=principal.id, name=principal.name, email=principal.email)
        order = providers.get_order_service().create_order(
            customer,
            dto.product_id,
            [measurement(m.name, m.value, m.unit) for m in dto.measurements],
            dto.notes,
        )
        return Response(
            {"message": "Order created successfully", "order": _present([order])[0]},
            status=status.HTTP_201_CREATED,
        )


class MyOrdersView(APIView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "orders_list"

    def get(self, request):
        principal = require_authenticated(request.user)
        orders = _present(providers.get_order_service().list_for_user(principal.id))
        return Response({"message": "Orders retrieved", "count": len(orders), "orders": orders})


class RetrieveOrderView(APIView):
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "orders_detail"

    def get(self, request, order_id):
        principal = require_authenticated(request.user)
        order = providers.get_order_service().get_order_for(principal, order_id)
        return Response({"message": "Order retrieved", "order": _present([order], with_customer=True)[0]})


class OrderStatusView(APIView):
    def patch(self, request, order_id):
        """Move the order to another status (admin only)."""
        require_role(request.user, ADMIN_ONLY)
        dto = TransitionDTO.model_validate(request.data)
        order = providers.get_order_service().transition(order_id, dto.status, dto.comment)
        return Response({"message": "Order status updated successfully", "order": _present([order])[0]})
