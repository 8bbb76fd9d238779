"""SQLAlchemy-backed implementation of ProductRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from orderdesk.domain.exceptions import ConflictError
from orderdesk.domain.model.product import Product
from orderdesk.domain.model.value_objects import Money
from orderdesk.domain.repository.product_repository import ProductRepository
from orderdesk.infrastructure.persistence.tables import ProductRow


class SqlProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        row = self._session.get(ProductRow, product_id)
        return to_domain(row) if row is not None else None

    def get_by_name(self, name: str) -> Product | None:
        row = self._session.scalars(
            select(ProductRow).where(ProductRow.name == name)
        ).one_or_none()
        return to_domain(row) if row is not None else None

    def list_all(self) -> list[Product]:
        rows = self._session.scalars(select(ProductRow).order_by(ProductRow.id))
        return [to_domain(row) for row in rows]

    def save(self, product: Product) -> None:
        try:
            # savepoint: a duplicate name must not poison the caller's transaction
            with self._session.begin_nested():
                row = None
                if product.id is not None:
                    row = self._session.get(ProductRow, product.id)
                if row is None:
                    row = ProductRow()
                    self._session.add(row)
                row.name = product.name
                row.description = product.description
                row.price = product.price.amount  # type: ignore[union-attr]
                self._session.flush()
        except IntegrityError as exc:
            raise ConflictError(f"Product '{product.name}' already exists") from exc
        product.id = row.id


# --- Serialization ------------------------------------------------------------


def to_domain(row: ProductRow) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        price=Money.of(row.price),
        description=row.description,
    )
