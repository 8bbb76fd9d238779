"""Application service: Register User use case."""

from __future__ import annotations

import logging

from orderdesk.domain.exceptions import ConflictError, ValidationError
from orderdesk.domain.model.user import User
from orderdesk.domain.repository.user_repository import UserRepository
from orderdesk.domain.service.security import PasswordHasher

logger = logging.getLogger(__name__)


class RegisterUserHandler:

    def __init__(self, user_repo: UserRepository, hasher: PasswordHasher) -> None:
        self._user_repo = user_repo
        self._hasher = hasher

    def handle(self, email: str | None, password: str | None) -> User:
        """Create an account.  No token is issued; the user logs in next."""
        if not email or not password:
            raise ValidationError("Missing email or password")

        if self._user_repo.get_by_email(email) is not None:
            raise ConflictError("User already exists")

        user = User(id=None, email=email, password_hash=self._hasher.hash(password))
        self._user_repo.save(user)
        logger.info("Registered user #%s", user.id)
        return user
