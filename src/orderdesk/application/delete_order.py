"""Application service: Delete Order use case.

Items go with their order; the products they referenced stay in the
catalog.
"""

from __future__ import annotations

import logging

from orderdesk.domain.exceptions import EntityNotFoundError
from orderdesk.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class DeleteOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> None:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            logger.warning("Delete requested for unknown order #%s", order_id)
            raise EntityNotFoundError(f"Order #{order_id} not found")

        self._order_repo.delete(order)
        logger.info("Order #%s deleted", order_id)
