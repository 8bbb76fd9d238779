"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from orderdesk.infrastructure.config import Settings
from orderdesk.infrastructure.persistence.database import (
    build_engine,
    build_session_factory,
    create_schema,
)
from orderdesk.infrastructure.persistence.sql_order_repository import (
    SqlOrderRepository,
)
from orderdesk.infrastructure.persistence.sql_product_repository import (
    SqlProductRepository,
)
from orderdesk.infrastructure.persistence.sql_user_repository import (
    SqlUserRepository,
)
from orderdesk.infrastructure.security.bcrypt_password_hasher import (
    BcryptPasswordHasher,
)
from orderdesk.infrastructure.security.jwt_token_service import JwtTokenService
from orderdesk.infrastructure.security.pyotp_totp_provider import PyotpTotpProvider


@dataclass(frozen=True)
class Container:
    """Process-wide collaborators shared by every request or command."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    hasher: BcryptPasswordHasher
    tokens: JwtTokenService
    totp: PyotpTotpProvider

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """One unit of work: commit on success, roll back on any error."""
        with self.session_factory.begin() as session:
            yield session


def build_container(settings: Settings, create_tables: bool = True) -> Container:
    engine = build_engine(settings.database_url)
    if create_tables:
        create_schema(engine)
    return Container(
        settings=settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        hasher=BcryptPasswordHasher(settings.bcrypt_rounds),
        tokens=JwtTokenService(settings.secret_key),
        totp=PyotpTotpProvider(),
    )


@lru_cache(maxsize=1)
def container() -> Container:
    return build_container(Settings.from_env())


def product_repository(session: Session) -> SqlProductRepository:
    return SqlProductRepository(session)


def order_repository(session: Session) -> SqlOrderRepository:
    return SqlOrderRepository(session)


def user_repository(session: Session) -> SqlUserRepository:
    return SqlUserRepository(session)
