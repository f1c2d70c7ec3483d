"""Trade API client, request descriptors and credential collaborators."""

from trade_offer_manager.api.client import TradeAPIClient
from trade_offer_manager.api.endpoints import ApiRequest
from trade_offer_manager.api.identifiers import SteamIdValidator
from trade_offer_manager.api.twofactor import TOTPCodeSource

__all__ = ["ApiRequest", "SteamIdValidator", "TOTPCodeSource", "TradeAPIClient"]
