"""Turns raw order input into domain values.

Shared by the create and update use cases.  Nothing here raises for bad
input: every problem is recorded as a Violation so the handler can report
all of them at once, together with the aggregate's own rule violations.
"""

from __future__ import annotations

from datetime import datetime, timezone

from orderdesk.application.dto import OrderItemSpec, RawAmount
from orderdesk.domain.exceptions import ValidationError
from orderdesk.domain.model.order import OrderItem, OrderStatus
from orderdesk.domain.model.rules import Violation
from orderdesk.domain.model.value_objects import Money
from orderdesk.domain.service.product_resolution_service import (
    ProductResolutionService,
)

MISSING_PRODUCT_MESSAGE = "Product name and price are required for every item."
EMPTY_ORDER_MESSAGE = "An order must contain at least one product."


def parse_datetime(value: str | datetime) -> datetime:
    """Parse an ISO-8601 value; naive values are taken as UTC."""
    parsed = value if isinstance(value, datetime) else datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class OrderAssembler:

    def __init__(self, resolver: ProductResolutionService) -> None:
        self._resolver = resolver
        self.violations: list[Violation] = []

    def status(self, value: str) -> OrderStatus | None:
        """Map a status name to the enum; unknown names become None and are
        reported by the order's own status rule."""
        try:
            return OrderStatus(value)
        except ValueError:
            return None

    def order_date(self, value: str | datetime) -> datetime | None:
        try:
            return parse_datetime(value)
        except (TypeError, ValueError):
            self.violations.append(
                Violation("orderDate", f"Invalid date: {value!r}. Use ISO-8601.")
            )
            return None

    def items(self, specs: list[OrderItemSpec]) -> list[OrderItem]:
        items: list[OrderItem] = []
        for index, spec in enumerate(specs):
            item = self._item(spec, f"orderItems[{index}].")
            if item is not None:
                items.append(item)
        return items

    # --- Internal helpers -----------------------------------------------------

    def _item(self, spec: OrderItemSpec, prefix: str) -> OrderItem | None:
        descriptor = spec.product
        if (
            descriptor is None
            or not descriptor.name
            or not descriptor.name.strip()
            or descriptor.price is None
        ):
            self.violations.append(Violation(prefix + "product", MISSING_PRODUCT_MESSAGE))
            return None

        catalog_price = self._money(descriptor.price, prefix + "product.price")
        if catalog_price is None:
            return None

        product = self._resolver.resolve(
            name=descriptor.name.strip(),
            price=catalog_price,
            description=descriptor.description,
        )

        # the transaction price defaults to the descriptor's, never to the
        # stored catalog price of a reused product
        if spec.price_at_purchase is not None:
            price_at_purchase = self._money(spec.price_at_purchase, prefix + "priceAtPurchase")
        else:
            price_at_purchase = catalog_price

        return OrderItem(
            product=product,
            quantity=1 if spec.quantity is None else spec.quantity,
            price_at_purchase=price_at_purchase,
        )

    def _money(self, value: RawAmount, field: str) -> Money | None:
        try:
            return Money.of(value)
        except ValidationError as exc:
            self.violations.append(Violation(field, str(exc)))
            return None
