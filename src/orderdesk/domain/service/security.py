"""Security ports used by the authentication use cases.

Hashing, token signing and one-time codes are delegated to libraries in
the infrastructure layer; the application layer only sees these
interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class PasswordHasher(ABC):

    @abstractmethod
    def hash(self, password: str) -> str:
        """Return a salted hash suitable for storage."""

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """Check *password* against a stored hash."""


class TokenService(ABC):

    @abstractmethod
    def issue(
        self,
        subject: str,
        ttl_seconds: int,
        claims: dict[str, Any] | None = None,
    ) -> str:
        """Sign a token for *subject* that expires after *ttl_seconds*."""

    @abstractmethod
    def decode(self, token: str) -> dict[str, Any]:
        """Return the verified payload.

        Raises AuthError if the signature, structure or expiry is invalid.
        """


class TotpProvider(ABC):

    @abstractmethod
    def random_secret(self) -> str:
        """Generate a new base32 shared secret."""

    @abstractmethod
    def provisioning_uri(self, secret: str, label: str, issuer: str) -> str:
        """Return the ``otpauth://`` URI authenticator apps scan."""

    @abstractmethod
    def verify(self, secret: str, code: str, valid_window: int = 0) -> bool:
        """Check *code* against *secret* at the current time step.

        ``valid_window`` also accepts that many steps before and after.
        """
