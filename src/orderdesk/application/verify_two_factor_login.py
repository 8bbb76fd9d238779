"""Application service: second step of a two-factor login.

Exchanges a pending token plus a TOTP code for a full session token.
"""

from __future__ import annotations

import logging

from orderdesk.application.login import PENDING_CLAIM
from orderdesk.domain.exceptions import AuthError, EntityNotFoundError, ValidationError
from orderdesk.domain.repository.user_repository import UserRepository
from orderdesk.domain.service.security import TokenService, TotpProvider

logger = logging.getLogger(__name__)


class VerifyTwoFactorLoginHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        tokens: TokenService,
        totp: TotpProvider,
        session_ttl: int,
        valid_window: int = 1,
    ) -> None:
        self._user_repo = user_repo
        self._tokens = tokens
        self._totp = totp
        self._session_ttl = session_ttl
        self._valid_window = valid_window

    def handle(self, temp_token: str | None, code: str | None) -> str:
        if not temp_token or not code:
            raise ValidationError("Missing token or code")

        payload = self._tokens.decode(temp_token)
        if payload.get(PENDING_CLAIM) is not True:
            raise AuthError("Invalid token type")

        email = payload.get("sub")
        if not email:
            raise AuthError("Invalid token payload")

        user = self._user_repo.get_by_email(email)
        if user is None:
            raise EntityNotFoundError("User not found")

        if not user.totp_secret or not self._totp.verify(
            user.totp_secret, code, self._valid_window
        ):
            logger.warning("Rejected second-factor code for user #%s", user.id)
            raise AuthError("Invalid 2FA code")

        logger.info("User #%s completed two-factor login", user.id)
        return self._tokens.issue(user.email, self._session_ttl)
