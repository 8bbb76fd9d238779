"""Abstract repository for User accounts."""

from __future__ import annotations

from abc import ABC, abstractmethod

from orderdesk.domain.model.user import User


class UserRepository(ABC):

    @abstractmethod
    def get_by_id(self, user_id: int) -> User | None:
        """Return a user by its ID, or None if not found."""

    @abstractmethod
    def get_by_email(self, email: str) -> User | None:
        """Return a user by its exact email, or None if not found."""

    @abstractmethod
    def save(self, user: User) -> None:
        """Persist a new or updated user.

        Raises ConflictError if the email is already registered.
        """
