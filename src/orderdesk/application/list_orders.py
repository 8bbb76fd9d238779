"""Application service: List Orders use case (query).

Filters:
- ``order_date``: a day (``YYYY-MM-DD``, a full ISO timestamp is cut to
  its day) matching ``[day 00:00:00, day 23:59:59]`` inclusive.  An
  unparsable value is logged and the filter skipped.
- ``term``: case-insensitive substring of order number OR customer name.

Both filters combine with AND; results come newest first.
"""

from __future__ import annotations

import logging
from datetime import datetime, time

from orderdesk.application.dto import OrderDTO
from orderdesk.application.order_assembly import parse_datetime
from orderdesk.domain.repository.order_repository import OrderQuery, OrderRepository

logger = logging.getLogger(__name__)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        order_date: str | None = None,
        term: str | None = None,
    ) -> list[OrderDTO]:
        logger.info("Order list requested (orderDate=%r, q=%r)", order_date, term)

        date_from = date_to = None
        if order_date:
            try:
                day = parse_datetime(order_date)
            except ValueError as exc:
                logger.warning("Ignoring invalid orderDate filter %r: %s", order_date, exc)
            else:
                date_from = datetime.combine(day.date(), time(0, 0, 0), day.tzinfo)
                date_to = datetime.combine(day.date(), time(23, 59, 59), day.tzinfo)

        query = OrderQuery(date_from=date_from, date_to=date_to, term=term or None)
        orders = self._order_repo.search(query)

        logger.info("Found %d order(s) after filtering", len(orders))
        return [OrderDTO.from_domain(order) for order in orders]
