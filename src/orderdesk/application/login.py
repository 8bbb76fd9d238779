"""Application service: password login, first step of authentication.

Unknown email and wrong password fail with the same message so the
endpoint does not reveal which addresses are registered.  Accounts with
two-factor enabled get a short-lived pending token instead of a session
token; only ``VerifyTwoFactorLoginHandler`` accepts it.
"""

from __future__ import annotations

import logging

from orderdesk.application.dto import LoginResult
from orderdesk.domain.exceptions import AuthError, ValidationError
from orderdesk.domain.repository.user_repository import UserRepository
from orderdesk.domain.service.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)

PENDING_CLAIM = "2fa_pending"


class LoginHandler:

    def __init__(
        self,
        user_repo: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        session_ttl: int,
        pending_ttl: int,
    ) -> None:
        self._user_repo = user_repo
        self._hasher = hasher
        self._tokens = tokens
        self._session_ttl = session_ttl
        self._pending_ttl = pending_ttl

    def handle(self, email: str | None, password: str | None) -> LoginResult:
        if not email or not password:
            raise ValidationError("Missing credentials")

        user = self._user_repo.get_by_email(email)
        if user is None or not self._hasher.verify(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise AuthError("Invalid credentials")

        if user.totp_enabled:
            temp_token = self._tokens.issue(
                user.email, self._pending_ttl, {PENDING_CLAIM: True}
            )
            logger.info("User #%s passed password check, second factor pending", user.id)
            return LoginResult(two_factor_required=True, temp_token=temp_token)

        logger.info("User #%s logged in", user.id)
        return LoginResult(token=self._tokens.issue(user.email, self._session_ttl))
