"""Application service: start two-factor enrolment.

Hands out a fresh secret and its provisioning URI.  Nothing is stored:
the secret only becomes active through ``EnableTwoFactorHandler``.
"""

from __future__ import annotations

from orderdesk.application.dto import TwoFactorSetup
from orderdesk.domain.model.user import User
from orderdesk.domain.service.security import TotpProvider


class SetupTwoFactorHandler:

    def __init__(self, totp: TotpProvider, issuer: str) -> None:
        self._totp = totp
        self._issuer = issuer

    def handle(self, user: User) -> TwoFactorSetup:
        secret = self._totp.random_secret()
        return TwoFactorSetup(
            secret=secret,
            provisioning_uri=self._totp.provisioning_uri(secret, user.email, self._issuer),
        )
