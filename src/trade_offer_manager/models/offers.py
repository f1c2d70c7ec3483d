"""Trade offer models and the poll snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Union

OfferId = Union[int, str]


class OfferState(IntEnum):
    """Trade offer states as reported by the trade API.

    The numeric values are part of the wire format.
    """

    ACTIVE = 2
    ACCEPTED = 3
    EXPIRED = 5
    CANCELED = 6
    DECLINED = 7
    INVALID_ITEMS = 8


def _coerce_state(value: Any) -> OfferState | int:
    """Map a wire state to OfferState, keeping unknown numeric values as plain ints.

    Non-numeric values raise ValueError/TypeError from ``int()``.
    """
    state = int(value)
    try:
        return OfferState(state)
    except ValueError:
        return state


def state_name(state: OfferState | int | None) -> str:
    if isinstance(state, OfferState):
        return state.name
    return str(state)


# Wire keys lifted into Offer attributes; everything else goes to payload.
_CORE_KEYS = ("id", "state", "sent_by_you", "time_created", "time_updated")


@dataclass(frozen=True)
class Offer:
    """A single trade offer as last seen on the trade API."""

    id: OfferId
    state: OfferState | int
    sent_by_you: bool
    time_created: int  # epoch seconds
    time_updated: int  # epoch seconds, >= time_created
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def is_active(self) -> bool:
        return self.state == OfferState.ACTIVE

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Offer:
        """Build an Offer from the JSON object returned by the trade API."""
        time_created = int(data.get("time_created") or 0)
        return cls(
            id=data["id"],
            state=_coerce_state(data["state"]),
            sent_by_you=bool(data.get("sent_by_you", False)),
            time_created=time_created,
            time_updated=int(data.get("time_updated") or time_created),
            payload={k: v for k, v in data.items() if k not in _CORE_KEYS},
        )

    def to_api(self) -> dict[str, Any]:
        data = dict(self.payload)
        data.update(
            id=self.id,
            state=int(self.state),
            sent_by_you=self.sent_by_you,
            time_created=self.time_created,
            time_updated=self.time_updated,
        )
        return data


@dataclass
class PollData:
    """Everything the poller knows about: all offers seen plus the update cursor.

    Offers are keyed by id and never removed, so finished offers stay
    visible. ``offers_since`` only moves forward.
    """

    offers: dict[OfferId, Offer] = field(default_factory=dict)
    offers_since: int = 0  # epoch seconds

    def sent_offers(self) -> list[Offer]:
        return [o for o in self.offers.values() if o.sent_by_you]

    def received_offers(self) -> list[Offer]:
        return [o for o in self.offers.values() if not o.sent_by_you]

    def copy(self) -> PollData:
        # Offers are frozen, a shallow copy of the mapping is enough.
        return PollData(offers=dict(self.offers), offers_since=self.offers_since)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form, for callers that persist the snapshot."""
        return {
            "offers": {str(oid): offer.to_api() for oid, offer in self.offers.items()},
            "offers_since": self.offers_since,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> PollData:
        if not data:
            return cls()
        raw_offers = data.get("offers") or {}
        if isinstance(raw_offers, dict):
            raw_offers = list(raw_offers.values())
        offers: dict[OfferId, Offer] = {}
        for raw in raw_offers:
            offer = Offer.from_api(raw)
            offers[offer.id] = offer
        return cls(offers=offers, offers_since=int(data.get("offers_since") or 0))
