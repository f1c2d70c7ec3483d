"""Internal record types for API pages and cycle results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from trade_offer_manager.exceptions import CancellationError
from trade_offer_manager.models.events import OfferEvent
from trade_offer_manager.models.offers import Offer, PollData


@dataclass
class OfferPage:
    """One page of the offer listing."""

    offers: list[Offer]
    current_page: int = 1
    total_pages: int = 1


@dataclass
class InventoryPage:
    """One page of an inventory listing. Items are passed through untouched."""

    items: list[dict[str, Any]]
    current_page: int = 1
    total_pages: int = 1


@dataclass
class DiffResult:
    """Output of comparing the previous snapshot with a fresh fetch."""

    events: list[OfferEvent]
    snapshot: PollData
    changed: bool  # pre- and post-cycle snapshots differ structurally


@dataclass
class CancellationOutcome:
    """What one pass of the auto-cancel policy did."""

    attempted: list[Offer] = field(default_factory=list)
    events: list[OfferEvent] = field(default_factory=list)
    errors: list[CancellationError] = field(default_factory=list)
