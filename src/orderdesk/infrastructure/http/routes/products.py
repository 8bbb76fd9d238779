"""Product catalog endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from orderdesk.application.add_product import AddProductHandler
from orderdesk.application.list_products import ListProductsHandler
from orderdesk.application.show_product import ShowProductHandler
from orderdesk.application.update_product import UpdateProductHandler
from orderdesk.infrastructure.bootstrap import Container, product_repository
from orderdesk.infrastructure.http.dependencies import current_user, get_container
from orderdesk.infrastructure.http.schemas import ProductIn

router = APIRouter(
    prefix="/api/products",
    tags=["products"],
    dependencies=[Depends(current_user)],
)


@router.get("")
def list_products(container: Container = Depends(get_container)) -> list:
    with container.transaction() as session:
        dtos = ListProductsHandler(product_repository(session)).handle()
    return [dto.to_dict() for dto in dtos]


@router.get("/{product_id}")
def show_product(product_id: int, container: Container = Depends(get_container)) -> dict:
    with container.transaction() as session:
        dto = ShowProductHandler(product_repository(session)).handle(product_id)
    return dto.to_dict()


@router.post("", status_code=201)
def add_product(body: ProductIn, container: Container = Depends(get_container)) -> dict:
    with container.transaction() as session:
        handler = AddProductHandler(product_repository(session))
        dto = handler.handle(body.name or "", body.price, body.description)
    return dto.to_dict()


@router.put("/{product_id}")
def update_product(
    product_id: int,
    body: ProductIn,
    container: Container = Depends(get_container),
) -> dict:
    with container.transaction() as session:
        handler = UpdateProductHandler(product_repository(session))
        dto = handler.handle(product_id, body.name, body.price, body.description)
    return dto.to_dict()
