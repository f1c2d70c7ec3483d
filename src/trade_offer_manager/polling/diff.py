"""Offer diff engine - classifies offer transitions between two snapshots."""

from __future__ import annotations

import logging
from typing import Iterable

from trade_offer_manager.models.events import EventName, OfferEvent
from trade_offer_manager.models.offers import Offer, OfferState, PollData
from trade_offer_manager.models.records import DiffResult

log = logging.getLogger(__name__)


class OfferDiffEngine:
    """Merges freshly fetched offers into a snapshot and classifies changes.

    Sent offers:
      - never seen before          -> unknown_offer_sent
      - seen, state differs        -> sent_offer_changed(offer, old_state)
    Received offers:
      - never seen before, active  -> new_offer
      - seen, state differs        -> received_offer_changed(offer, old_state)

    Unchanged states produce nothing. Sent events come before received ones.
    """

    def diff(self, previous: PollData, fetched: Iterable[Offer]) -> DiffResult:
        merged = previous.copy()
        for offer in fetched:
            merged.offers[offer.id] = offer

        events: list[OfferEvent] = []
        for offer in merged.sent_offers():
            old = previous.offers.get(offer.id)
            if old is None:
                events.append(OfferEvent(EventName.UNKNOWN_OFFER_SENT, offer))
            elif offer.state != old.state:
                events.append(
                    OfferEvent(EventName.SENT_OFFER_CHANGED, offer, old_state=old.state)
                )

        for offer in merged.received_offers():
            old = previous.offers.get(offer.id)
            if old is None:
                if offer.state == OfferState.ACTIVE:
                    events.append(OfferEvent(EventName.NEW_OFFER, offer))
            elif offer.state != old.state:
                events.append(
                    OfferEvent(EventName.RECEIVED_OFFER_CHANGED, offer, old_state=old.state)
                )

        latest = previous.offers_since
        for offer in merged.offers.values():
            if offer.time_updated > latest:
                latest = offer.time_updated
        merged.offers_since = latest

        changed = merged != previous
        if events:
            log.debug("Diff produced %d offer events (cursor %d)", len(events), latest)
        return DiffResult(events=events, snapshot=merged, changed=changed)
