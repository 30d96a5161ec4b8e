"""Create-order helpers registered in the helper registry.

A helper is the swappable strategy behind the create-order usecase. New
versions are added next to the existing ones under a new key (for example
``CreateOrderHelperV1``) and activated through
``settings.ORDERS_CREATE_HELPER_KEY``.
"""

from typing import Optional

from apps.core.errors import Failure
from apps.core.logging import ServiceLogger
from .domain import CreateOrderPipelineHelper, Event, EventPublisherPort, Order, OrderStorePort
from .schemas import CreateOrderInput
from .usecases import build_order, validate_create_order


ORDER_CREATED = "OrderCreated"


class CreateOrderHelperV0(CreateOrderPipelineHelper):
    """Persists through an order store and publishes ``OrderCreated``.

    Also exposes validation and construction so it can back either the
    thin ``CreateOrderUsecase`` or the ``CreateOrderPipelineUsecase``.

    Args:
        store: Where orders are saved.
        publisher: Where events are sent.
    """

    key = "CreateOrderHelperV0"

    def __init__(self, store: OrderStorePort, publisher: EventPublisherPort):
        self.store = store
        self.publisher = publisher
        self.logger = ServiceLogger("orders")

    def validate_input(self, data: CreateOrderInput) -> Optional[Failure]:
        return validate_create_order(data)

    def build_order(self, data: CreateOrderInput) -> Order:
        return build_order(data)

    def save(self, order: Order) -> Order:
        saved = self.store.save(order)
        self.logger.info(
            "Created order",
            {
                "orderId": saved.id,
                "customerId": saved.customer_id,
                "items": len(saved.items),
                "totalAmount": str(saved.total_amount),
                "currency": saved.currency,
            },
        )
        return saved

    def publish(self, order: Order) -> None:
        event = Event(id=order.id, name=ORDER_CREATED, data=order.to_event_payload())
        self.publisher.publish(event)
        self.logger.info(f"Published {ORDER_CREATED} event", {"orderId": order.id})
