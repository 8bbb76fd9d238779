"""PyJWT-backed TokenService (HS256)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from orderdesk.domain.exceptions import AuthError
from orderdesk.domain.service.security import TokenService


class JwtTokenService(TokenService):

    algorithm = "HS256"

    def __init__(self, secret_key: str) -> None:
        self._secret_key = secret_key

    def issue(
        self,
        subject: str,
        ttl_seconds: int,
        claims: dict[str, Any] | None = None,
    ) -> str:
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = dict(claims or {})
        payload.update(
            sub=subject,
            iat=now,
            exp=now + timedelta(seconds=ttl_seconds),
        )
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthError("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthError("Invalid token") from exc
