"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model.
Product resolution, item construction and validation all happen before
anything is written, so a rejected order leaves no trace; the caller's
transaction makes the product and order writes atomic.
"""

from __future__ import annotations

import logging

from orderdesk.application.dto import OrderDTO, OrderFields
from orderdesk.application.order_assembly import EMPTY_ORDER_MESSAGE, OrderAssembler
from orderdesk.domain.exceptions import ConflictError, ValidationError
from orderdesk.domain.model.order import Order, OrderStatus
from orderdesk.domain.model.rules import raise_if_any
from orderdesk.domain.repository.order_repository import OrderRepository
from orderdesk.domain.repository.product_repository import ProductRepository
from orderdesk.domain.service.product_resolution_service import (
    ProductResolutionService,
)

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, fields: OrderFields) -> OrderDTO:
        """Create a new order.

        Steps:
        1. Reject payloads without items.
        2. Resolve each product by name (reuse or build new).
        3. Build OrderItems with the transaction price (snapshot).
        4. Validate the assembled order, collecting every violation.
        5. Save new products, then the order; return a DTO.
        """
        if not fields.items:
            logger.warning("Rejected order without items")
            raise ValidationError(EMPTY_ORDER_MESSAGE, {"orderItems": [EMPTY_ORDER_MESSAGE]})

        resolver = ProductResolutionService(self._product_repo)
        assembler = OrderAssembler(resolver)

        items = assembler.items(fields.items)
        order = Order.create(
            customer_name=fields.customer_name or "",
            items=items,
            order_number=fields.order_number,
            order_date=(
                assembler.order_date(fields.order_date)
                if fields.order_date is not None
                else None
            ),
            description=fields.description,
            status=(
                assembler.status(fields.status)
                if fields.status is not None
                else OrderStatus.PENDING
            ),
        )

        violations = assembler.violations + order.violations()
        if violations:
            logger.warning("Order validation failed: %s", violations)
        raise_if_any(violations, "Order validation failed")

        if self._order_repo.get_by_order_number(order.order_number) is not None:
            raise ConflictError(f"Order number '{order.order_number}' already exists")

        resolver.persist_new(order.items)
        self._order_repo.save(order)

        logger.info(
            "Order #%s (%s) created with %d item(s), total %s",
            order.id,
            order.order_number,
            len(order.items),
            order.total_amount,
        )
        return OrderDTO.from_domain(order)
