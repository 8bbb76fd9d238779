"""Domain service: Product resolution.

Order payloads name their products instead of pointing at catalog IDs.
This service turns those names into Product aggregates: an existing
product is reused as-is (its price is never touched by an order), an
unknown name becomes a new product that is only written once the whole
order has passed validation.

Name uniqueness is guarded by the storage layer.  When two requests race
to create the same product, the loser's ``save`` raises ConflictError and
the service re-reads the winner instead of failing the order.
"""

from __future__ import annotations

import logging

from orderdesk.domain.exceptions import ConflictError
from orderdesk.domain.model.order import OrderItem
from orderdesk.domain.model.product import Product
from orderdesk.domain.model.value_objects import Money
from orderdesk.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductResolutionService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo
        self._pending: dict[str, Product] = {}

    @property
    def new_products(self) -> list[Product]:
        return list(self._pending.values())

    def resolve(
        self,
        name: str,
        price: Money,
        description: str | None = None,
    ) -> Product:
        """Return the catalog product called *name*, or a new unsaved one.

        The same name asked twice resolves to the same object, so an order
        naming a new product on two lines still creates a single product.
        """
        existing = self._product_repo.get_by_name(name)
        if existing is not None:
            return existing

        pending = self._pending.get(name)
        if pending is not None:
            return pending

        product = Product(id=None, name=name, price=price, description=description)
        self._pending[name] = product
        return product

    def persist_new(self, items: list[OrderItem]) -> None:
        """Save every product created by ``resolve``.

        Items pointing at a product that lost a creation race are rebound
        to the stored product.
        """
        for name, product in list(self._pending.items()):
            stored = self._save_or_reuse(product)
            if stored is not product:
                for item in items:
                    if item.product is product:
                        item.product = stored
            del self._pending[name]

    def _save_or_reuse(self, product: Product) -> Product:
        try:
            self._product_repo.save(product)
            return product
        except ConflictError:
            winner = self._product_repo.get_by_name(product.name)
            if winner is None:
                raise
            logger.info(
                "Product %r was created concurrently; reusing id %s",
                product.name,
                winner.id,
            )
            return winner
