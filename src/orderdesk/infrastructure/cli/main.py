import click

from orderdesk.infrastructure import bootstrap
from orderdesk.infrastructure.cli.order_commands import (
    order_create,
    order_delete,
    order_list,
    order_show,
)
from orderdesk.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_update,
)
from orderdesk.infrastructure.config import Settings, configure_logging
from orderdesk.infrastructure.persistence.database import create_schema


@click.group()
@click.option("--log-level", default=None, help="Override ORDERDESK_LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """OrderDesk: orders, products and two-factor auth."""
    configure_logging(log_level or Settings.from_env().log_level)


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, default=False, help="Restart on code changes.")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "orderdesk.infrastructure.http.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


@cli.group()
def db() -> None:
    """Manage the database."""


@db.command("init")
def db_init() -> None:
    """Create any missing tables."""
    container = bootstrap.container()
    create_schema(container.engine)
    click.echo(f"Schema ready at {container.settings.database_url}")


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_delete)
order.add_command(order_list)
order.add_command(order_show)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
