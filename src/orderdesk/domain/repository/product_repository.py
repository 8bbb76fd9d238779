"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQL, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderdesk.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Return a product by its exact name, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog, ordered by ID."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product and assign its ID.

        Raises ConflictError if another product already uses the name.
        """
