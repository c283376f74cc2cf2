"""Domain models, ports and service for the order lifecycle.

This module contains the dataclasses that describe an order and its status
history, the protocol definitions (ports) for persistence, the product
catalog and customer notification, and ``OrderLifecycleService``, which
creates orders and moves them through the status state machine. It does
not import Django; adapters in ``repository.py`` and ``adapters.py`` plug
the framework in.
"""

import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, List, Optional, Protocol

from apps.catalog.domain import DEFAULT_UNIT, Product
from apps.common.errors import Conflict, Forbidden, InvalidTransition, NotFound, Unavailable

from .measurements import validate_measurements

logger = logging.getLogger(__name__)


# ---- Enums ----
class OrderStatus(str, Enum):
    """Lifecycle states of an order.

    ``DELIVERED`` and ``CANCELLED`` are terminal.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PRODUCTION = "in_production"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.IN_PRODUCTION, OrderStatus.CANCELLED}),
    OrderStatus.IN_PRODUCTION: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---- Entities / DTOs ----
@dataclass(frozen=True)
class Measurement:
    """One body measurement supplied with an order.

    Attributes:
        name: Measurement name as sent by the customer.
        value: Raw value; validated to be a positive number before an order
            is stored.
        unit: Unit label, ``"cm"`` unless given.
    """

    name: str
    value: object
    unit: str


def measurement(name: str, value, unit: Optional[str] = None) -> Measurement:
    return Measurement(name=name, value=value, unit=unit or DEFAULT_UNIT)


@dataclass(frozen=True)
class StatusChange:
    status: OrderStatus
    timestamp: datetime
    comment: Optional[str] = None


@dataclass
class Order:
    """Container for order data.

    Attributes:
        id: Persistent identifier.
        number: Sequential order number shown to customers.
        user_id: Owner of the order.
        product_id: Ordered product.
        measurements: Measurements in the order the customer sent them.
        status: Current ``OrderStatus``.
        total_price: Product base price at creation; never recomputed.
        notes: Free-text notes from the customer.
        projected_delivery: Set when the order is confirmed.
        status_history: Append-only log, one entry per status held.
        created_at: Creation timestamp.
        version: Optimistic-concurrency counter bumped on every update.
    """

    id: uuid.UUID
    number: int
    user_id: uuid.UUID
    product_id: uuid.UUID
    measurements: List[Measurement]
    status: OrderStatus
    total_price: Decimal
    notes: str = ""
    projected_delivery: Optional[datetime] = None
    status_history: List[StatusChange] = field(default_factory=list)
    created_at: Optional[datetime] = None
    version: int = 1


@dataclass(frozen=True)
class Customer:
    """Who is placing the order; only what notifications need."""

    id: uuid.UUID
    name: str
    email: str


@dataclass(frozen=True)
class OrderPage:
    """One page of the full order listing, newest first.

    ``page`` is the page actually served: requests past the end get the
    last page.
    """

    orders: List[Order]
    total: int
    page: int
    page_size: int


@dataclass(frozen=True)
class OrderNotice:
    order_id: uuid.UUID
    number: int
    status: OrderStatus
    total_price: Decimal
    customer_name: str
    customer_email: str


class DuplicateOrderNumber(Exception):
    """Raised by an ``OrderStore`` when an order number is already taken."""


# ---- Ports (DIP) ----
class OrderStore(Protocol):
    """Port describing order persistence used by the domain."""

    def next_number(self) -> int:
        """Return a fresh order number, never handed out before."""
        raise NotImplementedError()

    def add(self, order: Order) -> None:
        """Insert a new order.

        Raises:
            DuplicateOrderNumber: If ``order.number`` is already stored.
        """
        raise NotImplementedError()

    def get(self, order_id: uuid.UUID) -> Optional[Order]:
        raise NotImplementedError()

    def list_by_user(self, user_id: uuid.UUID) -> List[Order]:
        raise NotImplementedError()

    def count_all(self) -> int:
        raise NotImplementedError()

    def list_page(self, offset: int, limit: int) -> List[Order]:
        """Return at most ``limit`` orders, newest first, skipping ``offset``."""
        raise NotImplementedError()

    def save_transition(self, order: Order, expected_version: int) -> bool:
        """Persist status, history and projected delivery of ``order``.

        The write only happens while the stored version still equals
        ``expected_version``; the store then sets ``order.version`` to the
        new value.

        Returns:
            True if the row was updated, False if it changed meanwhile.
        """
        raise NotImplementedError()


class ProductCatalog(Protocol):
    def get(self, product_id: uuid.UUID) -> Optional[Product]:
        raise NotImplementedError()


class Notifier(Protocol):
    """Port used to tell a customer their order was received."""

    def order_created(self, notice: OrderNotice) -> None:
        raise NotImplementedError()


# ---- Domain service ----
class OrderLifecycleService:
    """Domain service for creating orders and changing their status.

    Authorization is the caller's job (views check roles before calling in);
    the only rule enforced here is order ownership on reads.
    """

    def __init__(
        self,
        orders: OrderStore,
        products: ProductCatalog,
        notifier: Notifier,
        clock: Callable[[], datetime] = utcnow,
        strict_transitions: bool = True,
        max_number_retries: int = 5,
        max_update_retries: int = 3,
    ):
        """Initialize the service with required dependencies.

        Args:
            orders: Order persistence port.
            products: Read access to the catalog.
            notifier: Customer notification port.
            clock: Source of "now" (timezone-aware).
            strict_transitions: Enforce ``ALLOWED_TRANSITIONS``; when False
                any known status may follow any other.
            max_number_retries: Attempts to insert with a fresh number after
                a uniqueness collision.
            max_update_retries: Attempts of the compare-and-swap status write.
        """
        self.orders = orders
        self.products = products
        self.notifier = notifier
        self.clock = clock
        self.strict_transitions = strict_transitions
        self.max_number_retries = max_number_retries
        self.max_update_retries = max_update_retries

    def create_order(
        self,
        customer: Customer,
        product_id: uuid.UUID,
        measurements: Iterable[Measurement],
        notes: str = "",
    ) -> Order:
        """Place a made-to-measure order for ``customer``.

        Args:
            customer: The authenticated customer.
            product_id: Product being ordered.
            measurements: Supplied measurements, checked against the
                product's required set.
            notes: Optional customer notes.

        Returns:
            The persisted ``Order`` in ``pending`` status.

        Raises:
            NotFound: ``PRODUCT_NOT_FOUND`` if the product does not exist.
            Unavailable: If the product is not available.
            MissingMeasurements, ExtraMeasurements, InvalidMeasurementValue:
                From the measurement validator.
            Conflict: ``NUMBERING_CONFLICT`` when no free number was found.
        """
        product = self.products.get(product_id)
        if product is None:
            raise NotFound("Product not found", code="PRODUCT_NOT_FOUND")
        if not product.available:
            raise Unavailable()

        supplied = list(measurements)
        validate_measurements(product.required_measurements, supplied)

        now = self.clock()
        order = None
        for attempt in range(1, self.max_number_retries + 1):
            candidate = Order(
                id=uuid.uuid4(),
                number=self.orders.next_number(),
                user_id=customer.id,
                product_id=product.id,
                measurements=supplied,
                status=OrderStatus.PENDING,
                total_price=product.base_price,
                notes=notes or "",
                status_history=[StatusChange(OrderStatus.PENDING, now)],
                created_at=now,
            )
            try:
                self.orders.add(candidate)
            except DuplicateOrderNumber:
                logger.warning("order number collision", extra={"number": candidate.number, "attempt": attempt})
                continue
            order = candidate
            break

        if order is None:
            raise Conflict("Could not assign an order number", code="NUMBERING_CONFLICT")

        logger.info("order created", extra={"order_id": str(order.id), "number": order.number})
        self._notify_created(order, customer)
        return order

    def _notify_created(self, order: Order, customer: Customer) -> None:
        notice = OrderNotice(
            order_id=order.id,
            number=order.number,
            status=order.status,
            total_price=order.total_price,
            customer_name=customer.name,
            customer_email=customer.email,
        )
        try:
            self.notifier.order_created(notice)
        except Exception:
            # best effort: the order is already stored
            logger.exception("order notification failed", extra={"order_id": str(order.id)})

    def transition(self, order_id: uuid.UUID, new_status, comment: Optional[str] = None) -> Order:
        """Move an order to ``new_status`` and record it in the history.

        Confirming an order sets ``projected_delivery`` to now plus the
        product's estimated production days. The write is a compare-and-swap
        on ``version``; a stale read is re-read and re-validated.

        Raises:
            InvalidTransition: Unknown status, or a move the state machine
                forbids (strict mode).
            NotFound: ``ORDER_NOT_FOUND``, or ``PRODUCT_NOT_FOUND`` when
                confirming an order whose product was deleted.
            Conflict: ``CONCURRENT_UPDATE`` after all retries lost the race.
        """
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise InvalidTransition(
                f"Unknown status: {new_status}",
                valid_statuses=[s.value for s in OrderStatus],
            )

        for _ in range(self.max_update_retries):
            order = self.orders.get(order_id)
            if order is None:
                raise NotFound("Order not found", code="ORDER_NOT_FOUND")

            if self.strict_transitions and target not in ALLOWED_TRANSITIONS[order.status]:
                raise InvalidTransition(
                    f"Cannot move order from {order.status.value} to {target.value}",
                    current=order.status.value,
                    requested=target.value,
                )

            now = self.clock()
            projected = order.projected_delivery
            if target is OrderStatus.CONFIRMED:
                product = self.products.get(order.product_id)
                if product is None:
                    raise NotFound("Product not found", code="PRODUCT_NOT_FOUND")
                projected = now + timedelta(days=product.estimated_production_days)

            # history stays chronological even if the clock steps back
            last = order.status_history[-1].timestamp if order.status_history else now
            entry = StatusChange(target, max(now, last), comment)
            expected = order.version
            updated = replace(
                order,
                status=target,
                projected_delivery=projected,
                status_history=[*order.status_history, entry],
            )
            if self.orders.save_transition(updated, expected):
                logger.info(
                    "order status changed",
                    extra={"order_id": str(order.id), "from": order.status.value, "to": target.value},
                )
                return updated
            logger.warning("concurrent order update, retrying", extra={"order_id": str(order_id)})

        raise Conflict("Order was modified concurrently", code="CONCURRENT_UPDATE")

    def get_order_for(self, viewer, order_id: uuid.UUID) -> Order:
        """Return the order if ``viewer`` owns it or is an admin.

        Raises:
            NotFound: ``ORDER_NOT_FOUND``.
            Forbidden: When a customer asks for someone else's order.
        """
        order = self.orders.get(order_id)
        if order is None:
            raise NotFound("Order not found", code="ORDER_NOT_FOUND")
        if not viewer.is_admin and order.user_id != viewer.id:
            raise Forbidden("You do not have permission to view this order")
        return order

    def list_for_user(self, user_id: uuid.UUID) -> List[Order]:
        return self.orders.list_by_user(user_id)

    def page_all(self, page: int, page_size: int) -> OrderPage:
        total = self.orders.count_all()
        last_page = max(1, -(-total // page_size))
        page = min(max(page, 1), last_page)
        orders = self.orders.list_page((page - 1) * page_size, page_size)
        return OrderPage(orders=orders, total=total, page=page, page_size=page_size)
