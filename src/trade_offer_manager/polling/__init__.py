"""Polling engine: fetch, diff, auto-cancel and scheduling."""

from trade_offer_manager.polling.cancellation import CancellationPolicy
from trade_offer_manager.polling.diff import OfferDiffEngine
from trade_offer_manager.polling.fetcher import OfferFetcher
from trade_offer_manager.polling.scheduler import MINIMUM_POLL_INTERVAL, PollScheduler

__all__ = [
    "CancellationPolicy",
    "MINIMUM_POLL_INTERVAL",
    "OfferDiffEngine",
    "OfferFetcher",
    "PollScheduler",
]
