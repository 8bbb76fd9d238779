"""Order aggregate, the core of the domain.

The Order is an aggregate root that exclusively owns its items.  Every
item mutation goes through the root so the back-reference and the derived
total can never drift from the item list.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from orderdesk.domain.exceptions import ValidationError
from orderdesk.domain.model.product import Product
from orderdesk.domain.model.rules import (
    Rule,
    Violation,
    amount_at_most,
    at_most,
    check,
    not_blank,
    one_of,
    positive,
    present,
    raise_if_any,
)
from orderdesk.domain.model.value_objects import MAX_AMOUNT, Money

# largest quantity the INTEGER column can store
MAX_QUANTITY = 2**31 - 1


class OrderStatus(Enum):
    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def choices(cls) -> list[str]:
        return [status.value for status in cls]


def generate_order_number() -> str:
    """Unique, human-readable order reference, e.g. ``ORD-5f2c0a9be41d7``."""
    return f"ORD-{uuid.uuid4().hex[:13]}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


ORDER_ITEM_RULES = (
    Rule("order", "relatedOrder", present, "The order item must belong to an order."),
    Rule("product", "product", present, "The product of an order item must not be empty."),
    Rule("quantity", "quantity", present, "The quantity of an order item must not be blank."),
    Rule("quantity", "quantity", positive, "The quantity must be a positive integer."),
    Rule(
        "quantity",
        "quantity",
        at_most(MAX_QUANTITY),
        f"The quantity must not exceed {MAX_QUANTITY}.",
    ),
    Rule(
        "price_at_purchase",
        "priceAtPurchase",
        present,
        "The purchase price of an order item must not be blank.",
    ),
    Rule(
        "price_at_purchase",
        "priceAtPurchase",
        amount_at_most(MAX_AMOUNT),
        f"The purchase price must not exceed {MAX_AMOUNT}.",
    ),
)

ORDER_RULES = (
    Rule("order_number", "orderNumber", not_blank, "The order number must not be blank."),
    Rule("customer_name", "customerName", not_blank, "The customer name must not be blank."),
    Rule("order_date", "orderDate", present, "The order date must not be empty."),
    Rule(
        "status",
        "status",
        one_of(OrderStatus),
        "Choose a valid status: " + ", ".join(OrderStatus.choices()) + ".",
    ),
)


@dataclass(eq=False)
class OrderItem:
    """A purchased line.

    ``price_at_purchase`` is a snapshot taken when the item is built and
    never follows later changes to ``product.price``.  ``order`` is the
    back-reference maintained by ``Order.add_item`` / ``Order.remove_item``.
    """

    product: Product | None
    quantity: int | None
    price_at_purchase: Money | None
    id: int | None = None
    order: Order | None = field(default=None, repr=False)

    @property
    def subtotal(self) -> Money | None:
        if self.price_at_purchase is None or self.quantity is None:
            return None
        # out-of-range lines are reported by validation, not priced
        if not 0 <= self.quantity <= MAX_QUANTITY:
            return None
        if self.price_at_purchase.amount > MAX_AMOUNT:
            return None
        return self.price_at_purchase * self.quantity

    def violations(self, prefix: str = "") -> list[Violation]:
        found = check(self, ORDER_ITEM_RULES, prefix)
        if self.product is not None:
            found.extend(self.product.violations(f"{prefix}product."))
        return found


@dataclass(eq=False)
class Order:
    """Aggregate root for customer orders.

    Use ``Order.create()`` for new orders; it fills in the defaults.  The
    plain ``__init__`` is what repositories use to reconstitute stored
    orders.  Items passed to ``__init__`` are attached as if added one by
    one.  ``total_amount`` is derived and read-only.
    """

    id: int | None
    order_number: str
    customer_name: str
    order_date: datetime | None = field(default_factory=utc_now)
    description: str | None = None
    status: OrderStatus | None = OrderStatus.PENDING
    items: list[OrderItem] = field(default_factory=list)
    _total_amount: Money = field(default_factory=Money.zero, init=False, repr=False)

    def __post_init__(self) -> None:
        initial, self.items = self.items, []
        for item in initial:
            self.add_item(item)
        self.recompute_total()

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer_name: str,
        items: list[OrderItem],
        order_number: str | None = None,
        order_date: datetime | None = None,
        description: str | None = None,
        status: OrderStatus = OrderStatus.PENDING,
    ) -> Order:
        """Build a new, not yet validated order with defaults applied."""
        return Order(
            id=None,
            order_number=order_number if order_number is not None else generate_order_number(),
            customer_name=customer_name,
            order_date=order_date or utc_now(),
            description=description,
            status=status,
            items=list(items),
        )

    # --- Item lifecycle -------------------------------------------------------

    def add_item(self, item: OrderItem) -> None:
        if self._contains(item):
            raise ValidationError("Order item is already part of this order")
        item.order = self
        self.items.append(item)
        self.recompute_total()

    def remove_item(self, item: OrderItem) -> None:
        for index, existing in enumerate(self.items):
            if existing is item:
                del self.items[index]
                if item.order is self:
                    item.order = None
                break
        self.recompute_total()

    def replace_items(self, items: list[OrderItem]) -> list[OrderItem]:
        """Detach every current item, attach *items*; return the detached ones."""
        detached = list(self.items)
        for item in detached:
            self.remove_item(item)
        for item in items:
            self.add_item(item)
        return detached

    # --- Derived state --------------------------------------------------------

    @property
    def total_amount(self) -> Money:
        return self._total_amount

    def recompute_total(self) -> Money:
        total = Money.zero()
        for item in self.items:
            subtotal = item.subtotal
            if subtotal is not None:
                total = total + subtotal
        self._total_amount = total
        return total

    # --- Validation -----------------------------------------------------------

    def violations(self) -> list[Violation]:
        found = check(self, ORDER_RULES)
        if not self.items:
            found.append(
                Violation("orderItems", "An order must contain at least one product.")
            )
        for index, item in enumerate(self.items):
            found.extend(item.violations(f"orderItems[{index}]."))
        return found

    def validate(self) -> None:
        raise_if_any(self.violations(), "Order validation failed")

    # --- Internal helpers -----------------------------------------------------

    def _contains(self, item: OrderItem) -> bool:
        return any(existing is item for existing in self.items)
