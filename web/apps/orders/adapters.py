"""In-process adapters for the orders ports.

These adapters implement ``OrderStorePort`` and ``EventPublisherPort``
without any database or network access. They are used by unit tests and by
local development where a broker is not available.
"""

import json
import uuid
from typing import Dict, List

from apps.core.logging import ServiceLogger
from .domain import Event, EventPublisherPort, Order, OrderStorePort


class InMemoryOrderStore(OrderStorePort):
    """Keeps saved orders in a dict keyed by order id."""

    def __init__(self):
        self.orders: Dict[str, Order] = {}

    def save(self, order: Order) -> Order:
        """Assign fresh UUIDs to the order and its items and keep it.

        Raises:
            ValueError: If the order has no items or is already persisted.
        """
        if not order.items:
            raise ValueError("Cannot persist an order without items")
        order.assign_identifiers(str(uuid.uuid4()), [str(uuid.uuid4()) for _ in order.items])
        self.orders[order.id] = order
        return order


class InMemoryEventPublisher(EventPublisherPort):
    """Collects published events in ``events``."""

    def __init__(self):
        self.events: List[Event] = []

    def publish(self, event: Event) -> None:
        self.events.append(event)


class LoggingEventPublisher(EventPublisherPort):
    """Writes each event as a JSON log line on the ``orders.events`` logger.

    Args:
        topic: Logical topic name recorded with each event.
    """

    def __init__(self, topic: str = "orders"):
        self.topic = topic
        self.logger = ServiceLogger("orders.events")

    def publish(self, event: Event) -> None:
        # Fail here rather than in a formatter if the payload is not serializable
        body = json.loads(json.dumps(event.data))
        self.logger.info(
            f"Published {event.name}",
            {"topic": self.topic, "key": event.id, "event": event.name, "data": body},
        )
