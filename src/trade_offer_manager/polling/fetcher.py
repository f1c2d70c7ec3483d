"""Offer fetcher - paginated offer retrieval with cutoff-based early exit."""

from __future__ import annotations

import logging

from trade_offer_manager.interfaces.api import TradeAPI
from trade_offer_manager.models.offers import Offer

log = logging.getLogger(__name__)


def _keep_incremental(offer: Offer, cutoff: int) -> bool:
    return (
        offer.is_active
        or offer.time_updated == offer.time_created
        or offer.time_updated >= cutoff
    )


class OfferFetcher:
    """Pulls offers page by page from the listing endpoint.

    A full update keeps everything until the pages run out. An incremental
    update keeps active, never-updated and recently updated offers, and
    stops requesting pages once a page contains anything older than the
    cutoff. That early exit relies on the listing being sorted by update
    time, newest first; offers updated before the cutoff on later pages are
    never looked at.
    """

    def __init__(self, api: TradeAPI, per_page: int | None = None) -> None:
        self._api = api
        self._per_page = per_page

    async def fetch_offers(self, full_update: bool, cutoff: int) -> list[Offer]:
        """Fetch offers for one poll cycle.

        Any page error propagates; nothing fetched so far is returned.
        """
        merged: list[Offer] = []
        page = 1
        while True:
            result = await self._api.get_offers(page=page, per_page=self._per_page)

            if full_update:
                merged.extend(result.offers)
                reached_cutoff = False
            else:
                merged.extend(o for o in result.offers if _keep_incremental(o, cutoff))
                reached_cutoff = any(o.time_updated < cutoff for o in result.offers)

            log.debug(
                "Fetched offers page %d/%d (%d offers, %d kept so far)",
                page, result.total_pages, len(result.offers), len(merged),
            )

            if reached_cutoff or page + 1 > result.total_pages:
                return merged
            page += 1
