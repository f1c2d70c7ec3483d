"""SteamID64 validation for user-addressed API calls."""

from __future__ import annotations

from trade_offer_manager.exceptions import InvalidIdentifierError

# Individual accounts in the public universe start at this SteamID64.
STEAM_ID64_BASE = 76561197960265728
_STEAM_ID64_MAX = STEAM_ID64_BASE + 0xFFFFFFFF


class SteamIdValidator:
    """Accepts individual-account SteamID64 values (17 decimal digits)."""

    def validate(self, value: str) -> str:
        steam_id = str(value).strip()
        if len(steam_id) != 17 or not steam_id.isdigit():
            raise InvalidIdentifierError(f"Not a SteamID64: {value!r}")
        if not STEAM_ID64_BASE <= int(steam_id) <= _STEAM_ID64_MAX:
            raise InvalidIdentifierError(f"SteamID64 out of range: {value!r}")
        return steam_id
