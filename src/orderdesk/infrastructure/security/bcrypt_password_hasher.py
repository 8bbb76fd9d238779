"""bcrypt-backed PasswordHasher."""

from __future__ import annotations

import bcrypt

from orderdesk.domain.service.security import PasswordHasher

# bcrypt only looks at the first 72 bytes of a password
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


class BcryptPasswordHasher(PasswordHasher):

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(self._rounds)).decode("ascii")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("ascii"))
        except ValueError:
            # not a bcrypt hash
            return False
