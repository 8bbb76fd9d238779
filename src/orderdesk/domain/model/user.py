"""User account used for authentication."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    Two-factor login is enabled exactly when a TOTP secret is stored.
    The secret only gets here after the user proved possession of it
    (see ``EnableTwoFactorHandler``).
    """

    id: int | None
    email: str
    password_hash: str
    totp_secret: str | None = None

    @property
    def totp_enabled(self) -> bool:
        return bool(self.totp_secret)

    def enable_totp(self, secret: str) -> None:
        self.totp_secret = secret

    def disable_totp(self) -> None:
        self.totp_secret = None
