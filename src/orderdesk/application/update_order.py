"""Application service: Update Order use case.

Partial update: every supplied field overwrites the stored one, absent
fields are left alone.  Supplying ``items`` replaces the whole item set.

The repository hands out detached aggregates, so the order is reshaped
and validated in memory first; only a valid order reaches ``save``, which
is where the replaced items are actually destroyed.
"""

from __future__ import annotations

import logging

from orderdesk.application.dto import OrderDTO, OrderFields
from orderdesk.application.order_assembly import OrderAssembler
from orderdesk.domain.exceptions import ConflictError, EntityNotFoundError
from orderdesk.domain.model.order import Order
from orderdesk.domain.model.rules import raise_if_any
from orderdesk.domain.repository.order_repository import OrderRepository
from orderdesk.domain.repository.product_repository import ProductRepository
from orderdesk.domain.service.product_resolution_service import (
    ProductResolutionService,
)

logger = logging.getLogger(__name__)


class UpdateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, order_id: int, fields: OrderFields) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            logger.warning("Update requested for unknown order #%s", order_id)
            raise EntityNotFoundError(f"Order #{order_id} not found")

        resolver = ProductResolutionService(self._product_repo)
        assembler = OrderAssembler(resolver)

        self._apply_fields(order, fields, assembler)

        violations = assembler.violations + order.violations()
        if violations:
            logger.warning("Order #%s update rejected: %s", order_id, violations)
        raise_if_any(violations, "Order validation failed")

        if fields.order_number is not None:
            self._ensure_unique_number(order)

        resolver.persist_new(order.items)
        self._order_repo.save(order)

        logger.info("Order #%s updated, total %s", order.id, order.total_amount)
        return OrderDTO.from_domain(order)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _apply_fields(order: Order, fields: OrderFields, assembler: OrderAssembler) -> None:
        if fields.order_number is not None:
            order.order_number = fields.order_number
        if fields.customer_name is not None:
            order.customer_name = fields.customer_name
        if fields.order_date is not None:
            parsed = assembler.order_date(fields.order_date)
            if parsed is not None:
                order.order_date = parsed
        if fields.description is not None:
            order.description = fields.description
        if fields.status is not None:
            order.status = assembler.status(fields.status)
        if fields.items is not None:
            order.replace_items(assembler.items(fields.items))

    def _ensure_unique_number(self, order: Order) -> None:
        other = self._order_repo.get_by_order_number(order.order_number)
        if other is not None and other.id != order.id:
            raise ConflictError(f"Order number '{order.order_number}' already exists")
