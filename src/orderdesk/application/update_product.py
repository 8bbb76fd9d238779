"""Application service: Update Product use case."""

from __future__ import annotations

import logging

from orderdesk.application.dto import ProductDTO, RawAmount
from orderdesk.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ValidationError,
)
from orderdesk.domain.model.value_objects import Money
from orderdesk.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_id: int,
        name: str | None = None,
        price: RawAmount | None = None,
        description: str | None = None,
    ) -> ProductDTO:
        """Update the supplied fields of a product.

        This does NOT affect any existing orders: their items captured a
        price snapshot at purchase time.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        if name is not None and name.strip() != product.name:
            name = name.strip()
            other = self._product_repo.get_by_name(name)
            if other is not None and other.id != product.id:
                raise ConflictError(f"Product '{name}' already exists")
            product.name = name
        if description is not None:
            product.description = description
        if price is not None:
            try:
                product.update_price(Money.of(price))
            except ValidationError as exc:
                raise ValidationError(str(exc), {"price": [str(exc)]}) from exc

        product.validate()
        self._product_repo.save(product)
        logger.info("Product #%s updated", product.id)
        return ProductDTO.from_domain(product)
