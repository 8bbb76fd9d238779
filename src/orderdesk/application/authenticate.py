"""Application service: resolve a session token to its user.

Pending tokens from a two-factor login are refused here, which is what
keeps them from opening any endpoint besides the second-factor check.
"""

from __future__ import annotations

from orderdesk.application.login import PENDING_CLAIM
from orderdesk.domain.exceptions import AuthError
from orderdesk.domain.model.user import User
from orderdesk.domain.repository.user_repository import UserRepository
from orderdesk.domain.service.security import TokenService


class AuthenticateHandler:

    def __init__(self, user_repo: UserRepository, tokens: TokenService) -> None:
        self._user_repo = user_repo
        self._tokens = tokens

    def handle(self, token: str | None) -> User:
        if not token:
            raise AuthError("Missing token")

        payload = self._tokens.decode(token)
        if payload.get(PENDING_CLAIM):
            raise AuthError("Two-factor authentication not completed")

        subject = payload.get("sub")
        user = self._user_repo.get_by_email(subject) if subject else None
        if user is None:
            raise AuthError("Invalid token payload")
        return user
