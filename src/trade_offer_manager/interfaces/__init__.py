"""Protocol interfaces for the external collaborators of the manager."""

from trade_offer_manager.interfaces.api import TradeAPI
from trade_offer_manager.interfaces.auth import IdentifierValidator, OneTimeCodeSource
from trade_offer_manager.interfaces.store import SnapshotStore

__all__ = [
    "TradeAPI",
    "IdentifierValidator", "OneTimeCodeSource",
    "SnapshotStore",
]
