"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the HTTP and CLI layers can catch them uniformly and translate them into
status codes or user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated.

    ``violations`` maps a field path (``customerName``,
    ``orderItems[0].quantity``) to the messages raised against it.  It is
    empty for errors that do not concern a single field.
    """

    def __init__(
        self,
        message: str,
        violations: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message)
        self.violations: dict[str, list[str]] = violations or {}


class ConflictError(DomainException):
    """A unique key (order number, product name, email) is already taken."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class AuthError(DomainException):
    """Credentials, token or second-factor code were rejected."""
