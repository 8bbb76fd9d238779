"""Data Transfer Objects: plain containers that cross layer boundaries.

Input specs carry raw request values into the application layer; the
output DTOs carry the normalised representation back out.  ``to_dict``
renders the JSON shape the HTTP API returns (camelCase keys, decimals as
two-decimal strings, ISO-8601 dates).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from orderdesk.domain.model.order import Order, OrderItem
from orderdesk.domain.model.product import Product

RawAmount = str | int | float | Decimal


# --- Input --------------------------------------------------------------------


@dataclass(frozen=True)
class ProductSpec:
    """Input: the product descriptor embedded in an order item."""

    name: str | None
    price: RawAmount | None
    description: str | None = None


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one requested line (quantity defaults to 1, price to the
    descriptor's price)."""

    product: ProductSpec | None
    quantity: int | None = None
    price_at_purchase: RawAmount | None = None


@dataclass(frozen=True)
class OrderFields:
    """Input: order fields for create and update.

    ``None`` means "not supplied": create falls back to defaults, update
    leaves the stored value untouched.  ``items`` set to a list (even an
    empty one) replaces every stored item on update.
    """

    customer_name: str | None = None
    order_number: str | None = None
    order_date: str | datetime | None = None
    description: str | None = None
    status: str | None = None
    items: list[OrderItemSpec] | None = None


# --- Output -------------------------------------------------------------------


def _amount(value: Any) -> str | None:
    return None if value is None else str(value)


def format_datetime(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat(timespec="seconds")


@dataclass(frozen=True)
class ProductDTO:
    id: int
    name: str
    description: str | None
    price: str | None

    @staticmethod
    def from_domain(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,  # type: ignore[arg-type]
            name=product.name,
            description=product.description,
            price=_amount(product.price),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
        }


@dataclass(frozen=True)
class OrderItemDTO:
    id: int
    quantity: int | None
    price_at_purchase: str | None
    subtotal: str | None
    product: ProductDTO | None

    @staticmethod
    def from_domain(item: OrderItem) -> OrderItemDTO:
        return OrderItemDTO(
            id=item.id,  # type: ignore[arg-type]
            quantity=item.quantity,
            price_at_purchase=_amount(item.price_at_purchase),
            subtotal=_amount(item.subtotal),
            product=ProductDTO.from_domain(item.product) if item.product else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "quantity": self.quantity,
            "priceAtPurchase": self.price_at_purchase,
            "subtotal": self.subtotal,
            "product": self.product.to_dict() if self.product else None,
        }


@dataclass(frozen=True)
class OrderDTO:
    id: int
    order_number: str
    customer_name: str
    order_date: str | None
    description: str | None
    status: str | None
    total_amount: str
    items: list[OrderItemDTO]

    @staticmethod
    def from_domain(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            order_number=order.order_number,
            customer_name=order.customer_name,
            order_date=format_datetime(order.order_date),
            description=order.description,
            status=order.status.value if order.status else None,
            total_amount=str(order.total_amount),
            items=[OrderItemDTO.from_domain(item) for item in order.items],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "orderNumber": self.order_number,
            "customerName": self.customer_name,
            "orderDate": self.order_date,
            "description": self.description,
            "status": self.status,
            "totalAmount": self.total_amount,
            "orderItems": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class LoginResult:
    """Output of a password login: either a session token, or a pending
    token that is only good for the second-factor step."""

    token: str | None = None
    two_factor_required: bool = False
    temp_token: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.two_factor_required:
            return {"2fa_required": True, "temp_token": self.temp_token}
        return {"token": self.token}


@dataclass(frozen=True)
class TwoFactorSetup:
    secret: str
    provisioning_uri: str

    def to_dict(self) -> dict[str, Any]:
        return {"secret": self.secret, "qrCode": self.provisioning_uri}
