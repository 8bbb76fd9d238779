"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from orderdesk.application.add_product import AddProductHandler
from orderdesk.application.list_products import ListProductsHandler
from orderdesk.application.update_product import UpdateProductHandler
from orderdesk.domain.exceptions import DomainException
from orderdesk.infrastructure import bootstrap


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--description", default=None, help="Optional description.")
def product_add(name: str, price: str, description: str | None) -> None:
    """Add a new product to the catalog."""
    try:
        with bootstrap.container().transaction() as session:
            handler = AddProductHandler(product_repo=bootstrap.product_repository(session))
            product = handler.handle(name=name, price=price, description=description)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    with bootstrap.container().transaction() as session:
        products = ListProductsHandler(bootstrap.product_repository(session)).handle()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Price':>10}")
    click.echo("-" * 38)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<20} {str(p.price):>10}")


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--description", default=None, help="New description.")
def product_update(
    product_id: int,
    name: str | None,
    price: str | None,
    description: str | None,
) -> None:
    """Update a product's name, price or description.

    Existing orders keep the price they were placed at.
    """
    if name is None and price is None and description is None:
        raise click.UsageError("Nothing to update: pass --name, --price or --description.")

    try:
        with bootstrap.container().transaction() as session:
            handler = UpdateProductHandler(product_repo=bootstrap.product_repository(session))
            product = handler.handle(
                product_id=product_id, name=name, price=price, description=description
            )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' now at {product.price}")
