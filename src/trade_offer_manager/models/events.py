"""Event names and the classified offer transition record."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from trade_offer_manager.models.offers import Offer, OfferState


class EventName(str, Enum):
    """Names listeners can subscribe to on the EventSink."""

    DEBUG = "debug"  # (message)
    POLL_FAILURE = "poll_failure"  # (error)
    POLL_SUCCESS = "poll_success"  # ()
    POLL_DATA = "poll_data"  # (snapshot)
    UNKNOWN_OFFER_SENT = "unknown_offer_sent"  # (offer)
    SENT_OFFER_CHANGED = "sent_offer_changed"  # (offer, old_state)
    SENT_OFFER_CANCELED = "sent_offer_canceled"  # (offer, reason)
    NEW_OFFER = "new_offer"  # (offer)
    RECEIVED_OFFER_CHANGED = "received_offer_changed"  # (offer, old_state)


CANCEL_REASON_CANCEL_TIME = "cancelTime"


@dataclass(frozen=True)
class OfferEvent:
    """A classified notification about one offer, produced during a poll cycle."""

    name: EventName
    offer: Offer
    old_state: OfferState | int | None = None
    reason: str | None = None

    @property
    def args(self) -> tuple:
        """Positional arguments the listeners of this event receive."""
        if self.name in (EventName.SENT_OFFER_CHANGED, EventName.RECEIVED_OFFER_CHANGED):
            return (self.offer, self.old_state)
        if self.name == EventName.SENT_OFFER_CANCELED:
            return (self.offer, self.reason)
        return (self.offer,)
