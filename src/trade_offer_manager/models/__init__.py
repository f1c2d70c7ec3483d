"""Data models for the trade offer manager."""

from trade_offer_manager.models.offers import Offer, OfferId, OfferState, PollData
from trade_offer_manager.models.events import CANCEL_REASON_CANCEL_TIME, EventName, OfferEvent
from trade_offer_manager.models.records import (
    CancellationOutcome,
    DiffResult,
    InventoryPage,
    OfferPage,
)
from trade_offer_manager.models.config import DEFAULT_API_URL, ManagerConfig

__all__ = [
    "Offer", "OfferId", "OfferState", "PollData",
    "CANCEL_REASON_CANCEL_TIME", "EventName", "OfferEvent",
    "CancellationOutcome", "DiffResult", "InventoryPage", "OfferPage",
    "DEFAULT_API_URL", "ManagerConfig",
]
