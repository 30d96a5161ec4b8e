"""Repository layer for persisting orders.

The repository keeps a thin interface so the domain layer is not coupled to
Django ORM details: it takes a domain ``Order`` and hands back the same
order with its identifiers assigned.
"""

import uuid

from django.db import transaction

from .domain import Order, OrderStorePort
from .models import OrderModel, OrderItemModel


class OrderRepository(OrderStorePort):
    """Persists ``Order`` aggregates with the Django ORM."""

    def save(self, order: Order) -> Order:
        """Insert the order and all of its items in one transaction.

        Identifiers are assigned to the domain object only once the
        transaction has committed, so a failed insert leaves the order
        untouched and no partial set of items is ever stored.

        Args:
            order: New, non-empty domain order.

        Returns:
            The same order with ``id`` set on it and on every item.

        Raises:
            ValueError: If the order has no items or is already persisted.
        """
        if not order.items:
            raise ValueError("Cannot persist an order without items")
        if order.id is not None:
            raise ValueError(f"Order {order.id} is already persisted")

        order_id = uuid.uuid4()
        item_ids = [uuid.uuid4() for _ in order.items]
        with transaction.atomic():
            obj = OrderModel.objects.create(
                id=order_id,
                customer_id=order.customer_id,
                status=order.status.value,
                total_amount=order.total_amount,
                currency=order.currency,
                created_at=order.created_at,
                updated_at=order.updated_at,
            )
            OrderItemModel.objects.bulk_create(
                [
                    OrderItemModel(
                        id=item_id,
                        order=obj,
                        position=position,
                        product_id=item.product_id,
                        product_name=item.product_name,
                        quantity=item.quantity,
                        unit_price=item.unit_price,
                        line_total=item.line_total,
                    )
                    for position, (item, item_id) in enumerate(zip(order.items, item_ids))
                ]
            )

        order.assign_identifiers(str(order_id), [str(i) for i in item_ids])
        return order
