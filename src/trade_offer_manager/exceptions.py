"""Exception hierarchy for the trade offer manager."""

from __future__ import annotations


class TradeOfferError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(TradeOfferError):
    """A required setting is missing or invalid."""


class InvalidIdentifierError(TradeOfferError):
    """A platform user identifier failed validation."""


class TransportError(TradeOfferError):
    """The HTTP request could not be completed (network, timeout, bad body)."""


class APIStatusError(TradeOfferError):
    """The trade API answered, but reported a failure status."""

    def __init__(
        self, message: str, status: int | None = None, http_status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.http_status = http_status


class CancellationError(TradeOfferError):
    """Auto-cancelling a single offer failed."""

    def __init__(self, offer_id: int | str, cause: Exception) -> None:
        super().__init__(f"Can't auto-cancel offer #{offer_id}: {cause}")
        self.offer_id = offer_id
        self.cause = cause
