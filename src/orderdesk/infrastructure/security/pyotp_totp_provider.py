"""pyotp-backed TotpProvider (RFC 6238, 30 s steps, 6 digits)."""

from __future__ import annotations

import pyotp

from orderdesk.domain.service.security import TotpProvider


class PyotpTotpProvider(TotpProvider):

    def random_secret(self) -> str:
        return pyotp.random_base32()

    def provisioning_uri(self, secret: str, label: str, issuer: str) -> str:
        return pyotp.TOTP(secret).provisioning_uri(name=label, issuer_name=issuer)

    def verify(self, secret: str, code: str, valid_window: int = 0) -> bool:
        code = str(code).strip()
        if not code.isdigit():
            return False
        try:
            return pyotp.TOTP(secret).verify(code, valid_window=valid_window)
        except (TypeError, ValueError):
            # secret is not valid base32
            return False
