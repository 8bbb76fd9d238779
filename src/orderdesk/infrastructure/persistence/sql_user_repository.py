"""SQLAlchemy-backed implementation of UserRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from orderdesk.domain.exceptions import ConflictError
from orderdesk.domain.model.user import User
from orderdesk.domain.repository.user_repository import UserRepository
from orderdesk.infrastructure.persistence.tables import UserRow


class SqlUserRepository(UserRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_id(self, user_id: int) -> User | None:
        row = self._session.get(UserRow, user_id)
        return self._to_domain(row) if row is not None else None

    def get_by_email(self, email: str) -> User | None:
        row = self._session.scalars(
            select(UserRow).where(UserRow.email == email)
        ).one_or_none()
        return self._to_domain(row) if row is not None else None

    def save(self, user: User) -> None:
        try:
            with self._session.begin_nested():
                row = None
                if user.id is not None:
                    row = self._session.get(UserRow, user.id)
                if row is None:
                    row = UserRow()
                    self._session.add(row)
                row.email = user.email
                row.password = user.password_hash
                row.totp_secret = user.totp_secret
                self._session.flush()
        except IntegrityError as exc:
            raise ConflictError("User already exists") from exc
        user.id = row.id

    @staticmethod
    def _to_domain(row: UserRow) -> User:
        return User(
            id=row.id,
            email=row.email,
            password_hash=row.password,
            totp_secret=row.totp_secret,
        )
