"""Order endpoints.

Every handler call runs inside one transaction, so a failed create or
update leaves neither new products nor half-replaced items behind.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from orderdesk.application.create_order import CreateOrderHandler
from orderdesk.application.delete_order import DeleteOrderHandler
from orderdesk.application.list_orders import ListOrdersHandler
from orderdesk.application.show_order import ShowOrderHandler
from orderdesk.application.update_order import UpdateOrderHandler
from orderdesk.infrastructure.bootstrap import (
    Container,
    order_repository,
    product_repository,
)
from orderdesk.infrastructure.http.dependencies import current_user, get_container
from orderdesk.infrastructure.http.schemas import OrderIn

router = APIRouter(
    prefix="/api/orders",
    tags=["orders"],
    dependencies=[Depends(current_user)],
)


@router.get("")
def list_orders(
    order_date: Optional[str] = Query(default=None, alias="orderDate"),
    q: Optional[str] = Query(default=None),
    container: Container = Depends(get_container),
) -> list:
    with container.transaction() as session:
        dtos = ListOrdersHandler(order_repository(session)).handle(order_date=order_date, term=q)
    return [dto.to_dict() for dto in dtos]


@router.get("/{order_id}")
def show_order(order_id: int, container: Container = Depends(get_container)) -> dict:
    with container.transaction() as session:
        dto = ShowOrderHandler(order_repository(session)).handle(order_id)
    return dto.to_dict()


@router.post("", status_code=201)
def create_order(body: OrderIn, container: Container = Depends(get_container)) -> dict:
    with container.transaction() as session:
        handler = CreateOrderHandler(order_repository(session), product_repository(session))
        dto = handler.handle(body.to_fields())
    return dto.to_dict()


@router.put("/{order_id}")
def update_order(
    order_id: int,
    body: OrderIn,
    container: Container = Depends(get_container),
) -> dict:
    with container.transaction() as session:
        handler = UpdateOrderHandler(order_repository(session), product_repository(session))
        dto = handler.handle(order_id, body.to_fields())
    return dto.to_dict()


@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: int, container: Container = Depends(get_container)) -> Response:
    with container.transaction() as session:
        DeleteOrderHandler(order_repository(session)).handle(order_id)
    return Response(status_code=204)
