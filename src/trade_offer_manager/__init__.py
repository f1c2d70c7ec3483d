"""trade_offer_manager - trade offer polling, diffing and auto-cancel."""

from trade_offer_manager.events import EventSink
from trade_offer_manager.manager import TradeOfferManager
from trade_offer_manager.models import EventName, ManagerConfig, Offer, OfferState, PollData

__all__ = [
    "EventName",
    "EventSink",
    "ManagerConfig",
    "Offer",
    "OfferState",
    "PollData",
    "TradeOfferManager",
]
