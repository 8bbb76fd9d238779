"""SQLAlchemy-backed implementation of OrderRepository.

Every read builds a fresh, detached Order from its rows.  Writes go
through ``OrderRepository.save`` (which recomputes the total) into
``_write``, which mirrors the aggregate's current item list onto the
``order_item`` rows: rows for dropped items are deleted as orphans, rows
for new items are inserted and their IDs copied back.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from orderdesk.domain.exceptions import ConflictError
from orderdesk.domain.model.order import Order, OrderItem, OrderStatus
from orderdesk.domain.model.value_objects import Money
from orderdesk.domain.repository.order_repository import OrderQuery, OrderRepository
from orderdesk.infrastructure.persistence import sql_product_repository
from orderdesk.infrastructure.persistence.tables import OrderItemRow, OrderRow


class SqlOrderRepository(OrderRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._session.scalars(
            self._select().where(OrderRow.id == order_id)
        ).one_or_none()
        return self._to_domain(row) if row is not None else None

    def get_by_order_number(self, order_number: str) -> Order | None:
        row = self._session.scalars(
            self._select().where(OrderRow.order_number == order_number)
        ).one_or_none()
        return self._to_domain(row) if row is not None else None

    def search(self, query: OrderQuery) -> list[Order]:
        stmt = self._select()
        if query.date_from is not None:
            stmt = stmt.where(OrderRow.order_date >= _to_storage(query.date_from))
        if query.date_to is not None:
            stmt = stmt.where(OrderRow.order_date <= _to_storage(query.date_to))
        if query.term:
            term = query.term.lower()
            stmt = stmt.where(
                or_(
                    func.lower(OrderRow.order_number).contains(term, autoescape=True),
                    func.lower(OrderRow.customer_name).contains(term, autoescape=True),
                )
            )
        stmt = stmt.order_by(OrderRow.order_date.desc(), OrderRow.id.desc())
        return [self._to_domain(row) for row in self._session.scalars(stmt)]

    def delete(self, order: Order) -> None:
        row = self._session.get(OrderRow, order.id)
        if row is None:
            return
        self._session.delete(row)
        self._session.flush()

    def _write(self, order: Order) -> None:
        try:
            with self._session.begin_nested():
                row = None
                if order.id is not None:
                    row = self._session.get(OrderRow, order.id)
                if row is None:
                    row = OrderRow()
                    self._session.add(row)
                row.order_number = order.order_number
                row.customer_name = order.customer_name
                row.order_date = _to_storage(order.order_date)  # type: ignore[arg-type]
                row.description = order.description
                row.status = order.status.value  # type: ignore[union-attr]
                row.total_amount = order.total_amount.amount
                pairs = self._sync_items(row, order)
                self._session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                f"Order number '{order.order_number}' already exists"
            ) from exc

        order.id = row.id
        for item, item_row in pairs:
            item.id = item_row.id

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _select():
        return select(OrderRow).options(
            selectinload(OrderRow.items).selectinload(OrderItemRow.product)
        )

    @staticmethod
    def _sync_items(row: OrderRow, order: Order) -> list[tuple[OrderItem, OrderItemRow]]:
        kept_ids = {item.id for item in order.items if item.id is not None}
        existing = {item_row.id: item_row for item_row in row.items}

        for item_row in list(row.items):
            if item_row.id not in kept_ids:
                row.items.remove(item_row)  # delete-orphan

        pairs: list[tuple[OrderItem, OrderItemRow]] = []
        for item in order.items:
            item_row = existing.get(item.id) if item.id is not None else None
            if item_row is None:
                item_row = OrderItemRow()
                row.items.append(item_row)
            item_row.quantity = item.quantity  # type: ignore[assignment]
            item_row.price_at_purchase = item.price_at_purchase.amount  # type: ignore[union-attr]
            item_row.product_id = item.product.id  # type: ignore[union-attr,assignment]
            pairs.append((item, item_row))
        return pairs

    @staticmethod
    def _to_domain(row: OrderRow) -> Order:
        items = [
            OrderItem(
                id=item_row.id,
                product=sql_product_repository.to_domain(item_row.product),
                quantity=item_row.quantity,
                price_at_purchase=Money.of(item_row.price_at_purchase),
            )
            for item_row in row.items
        ]
        return Order(
            id=row.id,
            order_number=row.order_number,
            customer_name=row.customer_name,
            order_date=_from_storage(row.order_date),
            description=row.description,
            status=OrderStatus(row.status),
            items=items,
        )


def _to_storage(value: datetime) -> datetime:
    """Aware -> naive UTC, the form kept in the ``order_date`` column."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _from_storage(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc)
