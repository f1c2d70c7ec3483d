"""Auto-cancel policy for sent offers left active too long."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable

from trade_offer_manager.exceptions import CancellationError, TradeOfferError
from trade_offer_manager.interfaces.api import TradeAPI
from trade_offer_manager.models.events import CANCEL_REASON_CANCEL_TIME, EventName, OfferEvent
from trade_offer_manager.models.offers import Offer
from trade_offer_manager.models.records import CancellationOutcome

log = logging.getLogger(__name__)


class CancellationPolicy:
    """Cancels sent, still-active offers whose last update is older than cancel_time.

    A cancel_time of None or 0 (or less) turns the policy off.

    Attempts are sequential and independent: a failed cancel is recorded in
    the outcome and the next offer is tried. Nothing is retried within the
    same pass; the next poll cycle picks the offer up again.
    """

    def __init__(
        self,
        api: TradeAPI,
        cancel_time: int | None,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._api = api
        self._cancel_time = cancel_time  # ms
        self._wall_clock = wall_clock

    @property
    def enabled(self) -> bool:
        return bool(self._cancel_time) and self._cancel_time > 0

    def is_due(self, offer: Offer, now_ms: float) -> bool:
        if not self.enabled:
            return False
        if not offer.sent_by_you or not offer.is_active:
            return False
        return now_ms - offer.time_updated * 1000 >= self._cancel_time

    async def apply(self, offers: Iterable[Offer]) -> CancellationOutcome:
        outcome = CancellationOutcome()
        if not self.enabled:
            return outcome

        now_ms = self._wall_clock() * 1000
        for offer in offers:
            if not self.is_due(offer, now_ms):
                continue
            outcome.attempted.append(offer)
            try:
                await self._api.cancel_offer(offer.id)
            except TradeOfferError as exc:
                error = CancellationError(offer.id, exc)
                log.debug("%s", error)
                outcome.errors.append(error)
                continue
            log.info("Auto-canceled offer #%s after %dms", offer.id, self._cancel_time)
            outcome.events.append(
                OfferEvent(
                    EventName.SENT_OFFER_CANCELED, offer, reason=CANCEL_REASON_CANCEL_TIME,
                )
            )
        return outcome
