"""Application service: Add Product use case."""

from __future__ import annotations

import logging

from orderdesk.application.dto import ProductDTO, RawAmount
from orderdesk.domain.exceptions import ConflictError, ValidationError
from orderdesk.domain.model.product import Product
from orderdesk.domain.model.value_objects import Money
from orderdesk.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        price: RawAmount | None,
        description: str | None = None,
    ) -> ProductDTO:
        """Add a new product to the catalog."""
        name = (name or "").strip()
        try:
            amount = Money.of(price) if price is not None else None
        except ValidationError as exc:
            raise ValidationError(str(exc), {"price": [str(exc)]}) from exc

        product = Product(id=None, name=name, price=amount, description=description)
        product.validate()

        if self._product_repo.get_by_name(name) is not None:
            raise ConflictError(f"Product '{name}' already exists")

        self._product_repo.save(product)
        logger.info("Product #%s %r added at %s", product.id, product.name, product.price)
        return ProductDTO.from_domain(product)
