"""Configuration models for the trade offer manager."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_API_URL = "https://api-trade.opskins.com"


@dataclass
class ManagerConfig:
    """Complete manager configuration."""

    # API
    api_key: str = ""  # no key disables polling
    api_url: str = DEFAULT_API_URL
    request_timeout: float = 30.0  # seconds per HTTP request

    # Two-factor
    two_factor_secret: str = ""  # only needed to send or accept offers

    # Polling
    poll_interval: int = 5000  # ms
    cancel_time: int | None = None  # ms, None disables auto-cancel

    # Daemon
    log_level: str = "info"

    # Storage (used by the daemon to persist poll data between runs)
    db_path: str = "~/.trade_offer_manager/poll_data.db"

    @property
    def polling_enabled(self) -> bool:
        return bool(self.api_key)
