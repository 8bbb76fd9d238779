"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from orderdesk.application.create_order import CreateOrderHandler
from orderdesk.application.delete_order import DeleteOrderHandler
from orderdesk.application.dto import OrderDTO, OrderFields, OrderItemSpec, ProductSpec
from orderdesk.application.list_orders import ListOrdersHandler
from orderdesk.application.show_order import ShowOrderHandler
from orderdesk.domain.exceptions import DomainException, ValidationError
from orderdesk.infrastructure import bootstrap


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'Widget:3:9.99,Gadget:5:4.50' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        parts = entry.rsplit(":", 2)
        if len(parts) != 3 or not parts[0].strip():
            raise click.BadParameter(
                f"Invalid item format '{entry}'. Expected 'ProductName:Quantity:Price'."
            )
        name, qty_str, price = parts
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{name}'."
            )
        specs.append(
            OrderItemSpec(product=ProductSpec(name=name.strip(), price=price.strip()), quantity=qty)
        )
    return specs


def _fail(exc: DomainException) -> click.ClickException:
    message = str(exc)
    if isinstance(exc, ValidationError) and exc.violations:
        details = "; ".join(
            f"{field}: {' '.join(messages)}" for field, messages in exc.violations.items()
        )
        message = f"{message} ({details})"
    return click.ClickException(message)


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id} {dto.order_number}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}")
    click.echo(f"Date:     {dto.order_date}")
    if dto.description:
        click.echo(f"Note:     {dto.description}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        name = item.product.name if item.product else "?"
        click.echo(
            f"  {name:<20} {item.quantity:>5} {item.price_at_purchase:>10} {item.subtotal:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {dto.total_amount:>20}")


@click.command("create")
@click.option("--customer", required=True, help="Customer name.")
@click.option("--items", required=True, help="Items as 'Product:Qty:Price,...'.")
@click.option("--number", "order_number", default=None, help="Order number (generated if omitted).")
@click.option("--date", "order_date", default=None, help="ISO-8601 order date (now if omitted).")
@click.option("--status", default=None, help="Initial status (default Pending).")
@click.option("--description", default=None, help="Free-text note.")
def order_create(
    customer: str,
    items: str,
    order_number: str | None,
    order_date: str | None,
    status: str | None,
    description: str | None,
) -> None:
    """Create a new order, adding unknown products to the catalog."""
    fields = OrderFields(
        customer_name=customer,
        order_number=order_number,
        order_date=order_date,
        description=description,
        status=status,
        items=_parse_items(items),
    )
    try:
        with bootstrap.container().transaction() as session:
            handler = CreateOrderHandler(
                order_repo=bootstrap.order_repository(session),
                product_repo=bootstrap.product_repository(session),
            )
            dto = handler.handle(fields)
    except DomainException as exc:
        raise _fail(exc)

    click.echo("Order created.")
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    try:
        with bootstrap.container().transaction() as session:
            dto = ShowOrderHandler(order_repo=bootstrap.order_repository(session)).handle(order_id)
    except DomainException as exc:
        raise _fail(exc)

    _display_order(dto)


@click.command("list")
@click.option("--date", "order_date", default=None, help="Only orders on this day (YYYY-MM-DD).")
@click.option("--search", "term", default=None, help="Match order number or customer name.")
def order_list(order_date: str | None, term: str | None) -> None:
    """List orders, newest first."""
    with bootstrap.container().transaction() as session:
        dtos = ListOrdersHandler(order_repo=bootstrap.order_repository(session)).handle(
            order_date=order_date, term=term
        )

    if not dtos:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Number':<18} {'Customer':<20} {'Status':<11} {'Total':>10}")
    click.echo("-" * 69)
    for dto in dtos:
        click.echo(
            f"{dto.id:<6} {dto.order_number:<18} {dto.customer_name:<20} "
            f"{dto.status or '':<11} {dto.total_amount:>10}"
        )


@click.command("delete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to delete.")
def order_delete(order_id: int) -> None:
    """Delete an order and its items."""
    try:
        with bootstrap.container().transaction() as session:
            DeleteOrderHandler(order_repo=bootstrap.order_repository(session)).handle(order_id)
    except DomainException as exc:
        raise _fail(exc)

    click.echo(f"Order #{order_id} deleted.")
