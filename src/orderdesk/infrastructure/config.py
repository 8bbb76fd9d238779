"""Runtime configuration read from ``ORDERDESK_*`` environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

DEFAULT_DATABASE_URL = f"sqlite:///{_DATA_DIR / 'orderdesk.db'}"
DEFAULT_SECRET_KEY = "orderdesk-development-secret-change-me"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    secret_key: str = DEFAULT_SECRET_KEY
    token_ttl: int = 3600
    pending_token_ttl: int = 300
    totp_issuer: str = "OrderDesk"
    totp_login_window: int = 1
    bcrypt_rounds: int = 12
    log_level: str = "INFO"

    @staticmethod
    def from_env() -> Settings:
        env = os.environ
        return Settings(
            database_url=env.get("ORDERDESK_DATABASE_URL", DEFAULT_DATABASE_URL),
            secret_key=env.get("ORDERDESK_SECRET_KEY", DEFAULT_SECRET_KEY),
            token_ttl=int(env.get("ORDERDESK_TOKEN_TTL", "3600")),
            pending_token_ttl=int(env.get("ORDERDESK_PENDING_TOKEN_TTL", "300")),
            totp_issuer=env.get("ORDERDESK_TOTP_ISSUER", "OrderDesk"),
            totp_login_window=int(env.get("ORDERDESK_TOTP_LOGIN_WINDOW", "1")),
            bcrypt_rounds=int(env.get("ORDERDESK_BCRYPT_ROUNDS", "12")),
            log_level=env.get("ORDERDESK_LOG_LEVEL", "INFO").upper(),
        )

    @property
    def uses_default_secret(self) -> bool:
        return self.secret_key == DEFAULT_SECRET_KEY


def configure_logging(level: str = "INFO") -> None:
    """Install the root handler once per process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("orderdesk").setLevel(level)
