"""TradeAPI protocol - the remote trade API surface used by the manager."""

from __future__ import annotations

from typing import Protocol, Sequence

from trade_offer_manager.models.offers import Offer, OfferId, OfferState
from trade_offer_manager.models.records import InventoryPage, OfferPage


class TradeAPI(Protocol):
    """Authenticated access to the trade platform's WebAPI."""

    async def get_offers(
        self, page: int = 1, state: OfferState | None = None, per_page: int | None = None,
    ) -> OfferPage:
        """Fetch one page of offers, newest update first."""
        ...

    async def get_offer(self, offer_id: OfferId) -> Offer:
        ...

    async def send_offer(
        self,
        partner: int | str,
        items: Sequence[int],
        twofactor_code: str,
        message: str = "",
        token: str | None = None,
    ) -> Offer:
        """Create an offer to a uid (int) or a SteamID64 (str)."""
        ...

    async def accept_offer(self, offer_id: OfferId, twofactor_code: str) -> Offer:
        ...

    async def cancel_offer(self, offer_id: OfferId) -> Offer:
        ...

    async def get_inventory(
        self, page: int = 1, app_id: int | None = None, per_page: int | None = None,
    ) -> InventoryPage:
        """Fetch one page of our own inventory."""
        ...

    async def get_user_inventory(
        self, user: int | str, app_id: int | None = None, page: int = 1,
    ) -> InventoryPage:
        """Fetch one page of another user's inventory by uid (int) or SteamID64 (str)."""
        ...
