"""Request bodies accepted by the HTTP API.

Fields are deliberately permissive (mostly optional): required-field and
business-rule checks belong to the application layer, which reports them
as per-field violations.  Pydantic only guards JSON types.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from orderdesk.application.dto import OrderFields, OrderItemSpec, ProductSpec

Amount = Union[str, int, float]
Code = Union[str, int]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Credentials(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class TwoFactorLoginRequest(BaseModel):
    temp_token: Optional[str] = None
    code: Optional[Code] = None


class EnableTwoFactorRequest(BaseModel):
    secret: Optional[str] = None
    code: Optional[Code] = None


class ProductIn(CamelModel):
    name: Optional[str] = None
    price: Optional[Amount] = None
    description: Optional[str] = None

    def to_spec(self) -> ProductSpec:
        return ProductSpec(name=self.name, price=self.price, description=self.description)


class OrderItemIn(CamelModel):
    quantity: Optional[int] = None
    price_at_purchase: Optional[Amount] = None
    product: Optional[ProductIn] = None

    def to_spec(self) -> OrderItemSpec:
        return OrderItemSpec(
            product=self.product.to_spec() if self.product else None,
            quantity=self.quantity,
            price_at_purchase=self.price_at_purchase,
        )


class OrderIn(CamelModel):
    """Create and update share this shape; ``totalAmount`` is never read."""

    order_number: Optional[str] = None
    customer_name: Optional[str] = None
    order_date: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    order_items: Optional[List[OrderItemIn]] = None

    def to_fields(self) -> OrderFields:
        return OrderFields(
            customer_name=self.customer_name,
            order_number=self.order_number,
            order_date=self.order_date,
            description=self.description,
            status=self.status,
            items=(
                [item.to_spec() for item in self.order_items]
                if self.order_items is not None
                else None
            ),
        )


def optional_code(code: Optional[Code]) -> Optional[str]:
    """Normalise a TOTP code; JSON numbers lose their leading zeros."""
    if code is None:
        return None
    if isinstance(code, int):
        return f"{code:06d}"
    return code
