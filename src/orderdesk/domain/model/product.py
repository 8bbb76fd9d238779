"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, products are added to the catalog directly or the first
time an order names them.
"""

from __future__ import annotations

from dataclasses import dataclass

from orderdesk.domain.model.rules import (
    Rule,
    Violation,
    amount_at_most,
    check,
    min_length,
    not_blank,
    present,
    raise_if_any,
)
from orderdesk.domain.model.value_objects import MAX_AMOUNT, Money

PRODUCT_RULES = (
    Rule("name", "name", not_blank, "Product name must not be blank."),
    Rule("name", "name", min_length(2), "Product name must be at least 2 characters long."),
    Rule("price", "price", present, "Product price must not be blank."),
    Rule(
        "price",
        "price",
        amount_at_most(MAX_AMOUNT),
        f"Product price must not exceed {MAX_AMOUNT}.",
    ),
)


@dataclass(eq=False)
class Product:
    """A product in the catalog.

    This is an aggregate root: order items reference it, they never own
    it.  ``id`` is None until the repository stores the product.
    Non-negative prices are guaranteed by ``Money`` itself.
    """

    id: int | None
    name: str
    price: Money | None
    description: str | None = None

    def violations(self, prefix: str = "") -> list[Violation]:
        return check(self, PRODUCT_RULES, prefix)

    def validate(self) -> None:
        raise_if_any(self.violations(), "Product validation failed")

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because order items
        capture a price snapshot at purchase time.
        """
        self.price = new_price
