"""Pydantic schemas for the create-order operation.

The input schema is deliberately lenient: every field is optional so that a
payload with missing values still reaches the usecase, which owns the
business rules and their caller-facing messages. Pydantic only rejects
values of the wrong type (for example a non-numeric ``unitPrice``).

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, condecimal
from pydantic.alias_generators import to_camel


MONEY_DECIMAL_PLACES = 4


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class OrderItemInput(CamelModel):
    """One requested line: product, quantity and unit price."""

    product_id: Optional[str] = None
    quantity: int = 0
    # Stored with 4 fractional digits; finer prices are rejected, not rounded
    unit_price: Optional[condecimal(decimal_places=MONEY_DECIMAL_PLACES)] = None


class CreateOrderInput(CamelModel):
    """Input of ``Orders.CreateOrder``.

    Attributes:
        customer_id: Ordering customer.
        items: Requested lines, in display order.
        currency: ISO currency code all prices are expressed in.
    """

    customer_id: Optional[str] = None
    items: Optional[List[OrderItemInput]] = None
    currency: Optional[str] = None


class CreateOrderOutput(CamelModel):
    """Output of ``Orders.CreateOrder``."""

    order_id: str
    status: str
    total_amount: Decimal
    currency: str
    created_at: datetime

    def to_json(self) -> dict:
        """JSON-compatible dict with camelCase keys; decimals as strings."""
        return self.model_dump(mode="json", by_alias=True)


def describe_validation_error(exc: ValidationError) -> str:
    """Short ``"<field>: <reason>"`` message for the first schema error."""
    first = exc.errors()[0]
    loc = ".".join(str(part) for part in first.get("loc", ())) or "body"
    return f"{loc}: {first.get('msg', 'invalid value')}"
