"""Application service: finish two-factor enrolment.

The code must match the supplied secret at the current time step before
the secret is stored against the user.
"""

from __future__ import annotations

import logging

from orderdesk.domain.exceptions import EntityNotFoundError, ValidationError
from orderdesk.domain.repository.user_repository import UserRepository
from orderdesk.domain.service.security import TotpProvider

logger = logging.getLogger(__name__)


class EnableTwoFactorHandler:

    def __init__(self, user_repo: UserRepository, totp: TotpProvider) -> None:
        self._user_repo = user_repo
        self._totp = totp

    def handle(self, user_id: int, secret: str | None, code: str | None) -> None:
        if not secret or not code:
            raise ValidationError("Missing secret or code")

        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundError("User not found")

        if not self._totp.verify(secret, code):
            raise ValidationError("Invalid code", {"code": ["Invalid code"]})

        user.enable_totp(secret)
        self._user_repo.save(user)
        logger.info("Two-factor authentication enabled for user #%s", user.id)
