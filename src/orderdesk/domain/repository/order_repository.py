"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from orderdesk.domain.model.order import Order


@dataclass(frozen=True)
class OrderQuery:
    """Search criteria for ``OrderRepository.search``.

    ``date_from`` / ``date_to`` are inclusive bounds on ``order_date``;
    ``term`` is matched case-insensitively as a substring of the order
    number or the customer name.  Unset criteria do not filter.
    """

    date_from: datetime | None = None
    date_to: datetime | None = None
    term: str | None = None


class OrderRepository(ABC):
    """Persistence port for orders.

    Reads return detached copies: changing a returned order has no effect
    until it is passed to ``save``.  ``save`` is the single commit path for
    an order: it recomputes the derived total before handing the aggregate
    to ``_write``, so no caller can persist a stale ``total_amount``.
    """

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Order | None:
        """Return an order by its unique order number, or None."""

    @abstractmethod
    def search(self, query: OrderQuery) -> list[Order]:
        """Return matching orders, newest ``order_date`` first."""

    @abstractmethod
    def delete(self, order: Order) -> None:
        """Remove an order together with all of its items."""

    def save(self, order: Order) -> None:
        """Persist a new or updated order, items included."""
        order.recompute_total()
        self._write(order)

    @abstractmethod
    def _write(self, order: Order) -> None:
        """Store the order and its current items; assign missing IDs.

        Stored items no longer attached to the order are destroyed.
        Raises ConflictError if the order number is already taken.
        """
