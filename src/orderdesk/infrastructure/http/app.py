"""FastAPI application factory.

Run with ``orderdesk serve`` or
``uvicorn --factory orderdesk.infrastructure.http.app:create_app``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from orderdesk.infrastructure import bootstrap
from orderdesk.infrastructure.bootstrap import Container
from orderdesk.infrastructure.config import configure_logging
from orderdesk.infrastructure.http.errors import register_error_handlers
from orderdesk.infrastructure.http.routes import auth, orders, products, two_factor

logger = logging.getLogger(__name__)


def create_app(container: Container | None = None) -> FastAPI:
    if container is None:
        container = bootstrap.container()
        configure_logging(container.settings.log_level)
    if container.settings.uses_default_secret:
        logger.warning("ORDERDESK_SECRET_KEY is not set; using the development key")

    app = FastAPI(
        title="OrderDesk",
        description="Orders, products and two-factor authentication over JSON.",
        version="0.1.0",
    )
    app.state.container = container

    register_error_handlers(app)
    app.include_router(auth.router)
    app.include_router(two_factor.router)
    app.include_router(orders.router)
    app.include_router(products.router)

    @app.get("/health", tags=["system"])
    def health() -> dict:
        return {"status": "ok"}

    return app
