"""Application service: turn two-factor login off.

The stored secret is cleared without asking for a password or a current
code.
"""

from __future__ import annotations

import logging

from orderdesk.domain.exceptions import EntityNotFoundError
from orderdesk.domain.repository.user_repository import UserRepository

logger = logging.getLogger(__name__)


class DisableTwoFactorHandler:

    def __init__(self, user_repo: UserRepository) -> None:
        self._user_repo = user_repo

    def handle(self, user_id: int) -> None:
        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundError("User not found")

        # TODO: require the current TOTP code or the password before
        # clearing the secret.
        user.disable_totp()
        self._user_repo.save(user)
        logger.info("Two-factor authentication disabled for user #%s", user.id)
