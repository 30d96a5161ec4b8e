"""Domain models and ports for orders.

This module contains the order aggregate (``Order`` and its ``OrderItem``
lines), the ``Event`` envelope published to the message broker, and the
protocol definitions (ports) the create-order usecase depends on for side
effects: persisting an order and publishing an event.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, Protocol


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---- Enums ----
class OrderStatus(str, Enum):
    """Lifecycle states of an order.

    No transition table is enforced: any status may be set at any time.
    """

    CREATED = "CREATED"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


# ---- Entities ----
@dataclass(frozen=True)
class OrderItem:
    """A single line of an order.

    Attributes:
        product_id: Identifier of the ordered product.
        quantity: Number of units, a positive integer.
        unit_price: Price of one unit in the order currency.
        product_name: Optional denormalized display name.
        id: Line identifier, assigned when the order is persisted.
        order_id: Parent order identifier, assigned with ``id``.

    ``quantity`` must be positive and ``unit_price`` non-negative, otherwise
    construction raises ``ValueError``. ``line_total`` is always
    ``unit_price * quantity``; the dataclass is frozen, so changing quantity
    or price goes through ``with_quantity`` / ``with_unit_price`` which
    return a recomputed and revalidated copy.
    """

    product_id: str
    quantity: int
    unit_price: Decimal
    product_name: Optional[str] = None
    id: Optional[str] = None
    order_id: Optional[str] = None
    line_total: Decimal = field(init=False)

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError(f"Quantity must be positive, got {self.quantity}")
        if self.unit_price < 0:
            raise ValueError(f"Unit price cannot be negative, got {self.unit_price}")
        object.__setattr__(self, "line_total", self.unit_price * self.quantity)

    def with_quantity(self, quantity: int) -> "OrderItem":
        return replace(self, quantity=quantity)

    def with_unit_price(self, unit_price: Decimal) -> "OrderItem":
        return replace(self, unit_price=unit_price)

    def to_payload(self) -> dict:
        return {
            "productId": self.product_id,
            "quantity": self.quantity,
            "unitPrice": str(self.unit_price),
            "lineTotal": str(self.line_total),
        }


@dataclass
class Order:
    """Order aggregate root.

    Attributes:
        customer_id: Identifier of the ordering customer.
        currency: ISO currency code every item is priced in.
        items: Lines in insertion order. Mutate only through ``add_item`` /
            ``remove_item`` (or call ``recompute`` afterwards) so that
            ``total_amount`` stays the sum of the line totals.
        status: Current ``OrderStatus``. Use ``set_status`` so
            ``updated_at`` is refreshed.
        id: Persistent identifier, None until the order is saved.
        total_amount: Derived sum of ``line_total`` over ``items``.
    """

    customer_id: str
    currency: str
    items: List[OrderItem] = field(default_factory=list)
    status: OrderStatus = OrderStatus.CREATED
    id: Optional[str] = None
    total_amount: Decimal = Decimal("0")
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        self.items = list(self.items)
        self.recompute()

    def __setattr__(self, name, value):
        if name == "currency" and getattr(self, "items", None) and value != self.currency:
            raise ValueError("Currency cannot change once items are priced in it")
        super().__setattr__(name, value)

    def recompute(self) -> Decimal:
        """Recompute ``total_amount`` from the current items."""
        self.total_amount = sum((item.line_total for item in self.items), Decimal("0"))
        return self.total_amount

    def add_item(self, item: OrderItem) -> None:
        """Append ``item`` and recompute the total.

        Raises:
            ValueError: If the order is already persisted.
        """
        if self.id is not None:
            raise ValueError("Cannot add items to a persisted order")
        self.items.append(item)
        self.recompute()

    def remove_item(self, item: OrderItem) -> None:
        """Remove ``item`` and recompute the total.

        Raises:
            ValueError: If the order is already persisted or does not
                contain ``item``.
        """
        if self.id is not None:
            raise ValueError("Cannot remove items from a persisted order")
        self.items.remove(item)
        self.recompute()

    def set_status(self, status: OrderStatus) -> None:
        self.status = OrderStatus(status)
        self.updated_at = utcnow()

    def assign_identifiers(self, order_id: str, item_ids: List[str]) -> None:
        """Assign the persistent id to the order and each of its items.

        Args:
            order_id: Identifier of the order.
            item_ids: One identifier per item, in item order.

        Raises:
            ValueError: If the order already has an id or ``item_ids`` does
                not match the items.
        """
        if self.id is not None:
            raise ValueError(f"Order already has identifier {self.id}")
        if len(item_ids) != len(self.items):
            raise ValueError("Exactly one identifier per item is required")
        self.id = order_id
        self.items = [
            replace(item, id=item_id, order_id=order_id)
            for item, item_id in zip(self.items, item_ids)
        ]
        self.updated_at = utcnow()

    def to_event_payload(self) -> dict:
        """Body of the ``OrderCreated`` event."""
        return {
            "orderId": self.id,
            "customerId": self.customer_id,
            "items": [item.to_payload() for item in self.items],
            "totalAmount": str(self.total_amount),
            "currency": self.currency,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Event:
    """Message handed to the event publisher.

    Attributes:
        id: Event key; for order events the order id.
        name: Event name, e.g. ``OrderCreated``.
        data: Arbitrary JSON-serializable payload.
    """

    id: str
    name: str
    data: Any


# ---- Ports (DIP) ----
class OrderStorePort(Protocol):
    """Persists orders."""

    def save(self, order: Order) -> Order:
        """Persist ``order`` and its items in one atomic step.

        Implementations assign the identifiers through
        ``Order.assign_identifiers``.

        Returns:
            The identified order.
        """
        raise NotImplementedError()


class EventPublisherPort(Protocol):
    """Publishes events to the outside world."""

    def publish(self, event: Event) -> None:
        raise NotImplementedError()


class CreateOrderHelper(Protocol):
    """Side effects needed by the create-order usecase."""

    def save(self, order: Order) -> Order:
        """Persist the order and return it with identifiers assigned."""
        raise NotImplementedError()

    def publish(self, order: Order) -> None:
        """Emit one ``OrderCreated`` event for a saved order."""
        raise NotImplementedError()


class CreateOrderPipelineHelper(CreateOrderHelper, Protocol):
    """Helper owning the whole pipeline: validate, build, save, publish."""

    def validate_input(self, data: Any) -> Any:
        """Return a ``Failure`` for invalid input, None otherwise."""
        raise NotImplementedError()

    def build_order(self, data: Any) -> Order:
        raise NotImplementedError()
