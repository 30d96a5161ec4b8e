"""Create-order business logic.

``CreateOrderUsecase`` validates the input, builds the ``Order`` aggregate
and delegates persistence and publication to its helper. Validation and
construction live here so they can be tested without any helper.

``CreateOrderPipelineUsecase`` is the alternative decomposition where the
helper owns every step and the usecase only sequences them.
"""

from typing import Optional, Union

from apps.core.errors import Failure
from apps.core.logging import ServiceLogger
from apps.core.ports import LoggerPort

from .domain import CreateOrderHelper, CreateOrderPipelineHelper, Order, OrderItem
from .schemas import CreateOrderInput, CreateOrderOutput


CUSTOMER_REQUIRED = "Customer ID is required"
ITEMS_REQUIRED = "Order must contain at least one item"
CURRENCY_REQUIRED = "Currency is required"
PRODUCT_REQUIRED = "Product ID is required for all items"
QUANTITY_POSITIVE = "Quantity must be greater than zero"
UNIT_PRICE_POSITIVE = "Unit price must be greater than zero"

PUBLISH_FAILURE_LOG = "log"
PUBLISH_FAILURE_FAIL = "fail"
PUBLISH_FAILURE_POLICIES = (PUBLISH_FAILURE_LOG, PUBLISH_FAILURE_FAIL)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def validate_create_order(data: CreateOrderInput) -> Optional[Failure]:
    """Check the business rules of an order request.

    Rules are checked in a fixed order and the first broken one wins:
    customer, items, currency, then each item in list order (product,
    quantity, unit price).

    Returns:
        A validation ``Failure`` for the first broken rule, or None.
    """
    if _blank(data.customer_id):
        return Failure.validation(CUSTOMER_REQUIRED)
    if not data.items:
        return Failure.validation(ITEMS_REQUIRED)
    if _blank(data.currency):
        return Failure.validation(CURRENCY_REQUIRED)
    for item in data.items:
        if _blank(item.product_id):
            return Failure.validation(PRODUCT_REQUIRED)
        if item.quantity <= 0:
            return Failure.validation(QUANTITY_POSITIVE)
        if item.unit_price is None or item.unit_price <= 0:
            return Failure.validation(UNIT_PRICE_POSITIVE)
    return None


def build_order(data: CreateOrderInput) -> Order:
    """Build a CREATED order from a validated request."""
    order = Order(customer_id=data.customer_id, currency=data.currency)
    for item in data.items:
        order.add_item(
            OrderItem(product_id=item.product_id, quantity=item.quantity, unit_price=item.unit_price)
        )
    return order


def to_output(order: Order) -> CreateOrderOutput:
    return CreateOrderOutput(
        order_id=order.id,
        status=order.status.value,
        total_amount=order.total_amount,
        currency=order.currency,
        created_at=order.created_at,
    )


class CreateOrderUsecase:
    """Validate → build → save → publish.

    Args:
        helper: Persists and publishes the order.
        publish_failure_policy: What to do when publishing fails after the
            order was saved. ``"log"`` logs a critical record and still
            returns the created order; ``"fail"`` lets the error propagate.
            Publishing is never retried.
        logger: Optional log sink.
    """

    def __init__(
        self,
        helper: CreateOrderHelper,
        publish_failure_policy: str = PUBLISH_FAILURE_LOG,
        logger: Optional[LoggerPort] = None,
    ):
        if publish_failure_policy not in PUBLISH_FAILURE_POLICIES:
            raise ValueError(f"Unknown publish failure policy: {publish_failure_policy}")
        self.helper = helper
        self.publish_failure_policy = publish_failure_policy
        self.logger: LoggerPort = logger or ServiceLogger("orders")

    def validate(self, data: CreateOrderInput) -> Optional[Failure]:
        return validate_create_order(data)

    def build(self, data: CreateOrderInput) -> Order:
        return build_order(data)

    def execute(self, data: CreateOrderInput) -> Union[CreateOrderOutput, Failure]:
        failure = self.validate(data)
        if failure is not None:
            return failure

        order = self.build(data)
        saved = self.helper.save(order)
        self._publish(saved)
        return to_output(saved)

    def _publish(self, order: Order) -> None:
        try:
            self.helper.publish(order)
        except Exception as exc:
            if self.publish_failure_policy == PUBLISH_FAILURE_FAIL:
                raise
            self.logger.critical(
                "OrderCreated event could not be published; order was saved",
                exc,
                {"orderId": order.id, "error": str(exc)},
            )


class CreateOrderPipelineUsecase(CreateOrderUsecase):
    """Pass-through pipeline: the helper validates and builds too."""

    helper: CreateOrderPipelineHelper

    def validate(self, data: CreateOrderInput) -> Optional[Failure]:
        return self.helper.validate_input(data)

    def build(self, data: CreateOrderInput) -> Order:
        return self.helper.build_order(data)
