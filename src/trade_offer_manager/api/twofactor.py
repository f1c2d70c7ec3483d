"""Time-based one-time codes for sending and accepting offers."""

from __future__ import annotations

import pyotp

from trade_offer_manager.exceptions import ConfigError


class TOTPCodeSource:
    """Generates the current 6-digit TOTP code from the account's 2FA secret."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ConfigError(
                "two_factor_secret is required to send or accept offers"
            )
        self._totp = pyotp.TOTP(secret)

    def code(self) -> str:
        return self._totp.now()
