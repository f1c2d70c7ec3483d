"""Trade offer manager - wires the polling engine to the trade API and event sink."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Sequence

from trade_offer_manager.api.client import TradeAPIClient
from trade_offer_manager.api.identifiers import SteamIdValidator
from trade_offer_manager.api.twofactor import TOTPCodeSource
from trade_offer_manager.events import EventSink, Listener
from trade_offer_manager.exceptions import TradeOfferError
from trade_offer_manager.interfaces.api import TradeAPI
from trade_offer_manager.interfaces.auth import IdentifierValidator, OneTimeCodeSource
from trade_offer_manager.models.config import ManagerConfig
from trade_offer_manager.models.events import EventName
from trade_offer_manager.models.offers import Offer, OfferId, OfferState, PollData
from trade_offer_manager.polling.cancellation import CancellationPolicy
from trade_offer_manager.polling.diff import OfferDiffEngine
from trade_offer_manager.polling.fetcher import OfferFetcher
from trade_offer_manager.polling.scheduler import PollScheduler

log = logging.getLogger(__name__)


class TradeOfferManager:
    """Polls the trade API for offer changes and exposes the direct operations.

    Each poll cycle fetches offers since the last cursor, diffs them against
    the snapshot, auto-cancels stale sent offers, then emits the resulting
    events. The snapshot (``poll_data``) is owned here and only replaced by
    the cycle; listen to ``poll_data`` events to persist it.
    """

    def __init__(
        self,
        cfg: ManagerConfig,
        poll_data: PollData | dict | None = None,
        *,
        api: TradeAPI | None = None,
        code_source: OneTimeCodeSource | None = None,
        validator: IdentifierValidator | None = None,
        events: EventSink | None = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._cfg = cfg
        if isinstance(poll_data, PollData):
            self.poll_data = poll_data
        else:
            self.poll_data = PollData.from_dict(poll_data)

        self.api: TradeAPI = api or TradeAPIClient(
            cfg.api_key, cfg.api_url, timeout=cfg.request_timeout,
        )
        self.events = events or EventSink()
        self.validator: IdentifierValidator = validator or SteamIdValidator()
        self._code_source = code_source

        self.fetcher = OfferFetcher(self.api)
        self.diff_engine = OfferDiffEngine()
        self.cancellation = CancellationPolicy(
            self.api, cfg.cancel_time, wall_clock=wall_clock,
        )
        self.scheduler = PollScheduler(
            self._poll_cycle,
            poll_interval=cfg.poll_interval,
            enabled=cfg.polling_enabled,
            clock=clock,
        )

    # ── Events ────────────────────────────────────────────

    def on(self, name: EventName | str, listener: Listener) -> Listener:
        return self.events.on(name, listener)

    def _debug(self, message: str) -> None:
        log.debug(message)
        self.events.emit(EventName.DEBUG, message)

    # ── Polling ───────────────────────────────────────────

    def start(self) -> None:
        """Start polling on the running event loop."""
        self.scheduler.start()

    def stop(self) -> None:
        self.scheduler.stop()

    async def poll_now(self) -> bool:
        """Trigger a poll cycle by hand. Returns True if it ran immediately."""
        return await self.scheduler.trigger()

    async def _poll_cycle(self) -> None:
        previous = self.poll_data
        offers_since = previous.offers_since
        full_update = not offers_since

        self._debug(
            f"Doing trade offer poll since {offers_since}"
            f"{' (full update)' if full_update else ''}"
        )
        try:
            fetched = await self.fetcher.fetch_offers(full_update, offers_since)
        except TradeOfferError as exc:
            self._debug(f"Error getting trade offers for poll: {exc}")
            self.events.emit(EventName.POLL_FAILURE, exc)
            return

        result = self.diff_engine.diff(previous, fetched)
        self.poll_data = result.snapshot

        outcome = await self.cancellation.apply(result.snapshot.sent_offers())
        for error in outcome.errors:
            self._debug(str(error))

        for event in result.events + outcome.events:
            self.events.emit(event.name, *event.args)

        self.events.emit(EventName.POLL_SUCCESS)
        if result.changed:
            self.events.emit(EventName.POLL_DATA, self.poll_data)

    # ── Direct operations ─────────────────────────────────

    def _one_time_code(self) -> str:
        if self._code_source is None:
            self._code_source = TOTPCodeSource(self._cfg.two_factor_secret)
        return self._code_source.code()

    def _partner(self, partner: int | str) -> int | str:
        if isinstance(partner, int):
            return partner
        return self.validator.validate(partner)

    async def get_offer(self, offer_id: OfferId) -> Offer:
        return await self.api.get_offer(offer_id)

    async def get_offers(self, state: OfferState | None = None, page: int = 1) -> list[Offer]:
        """One page of the offer listing, optionally filtered by state."""
        return (await self.api.get_offers(page=page, state=state)).offers

    async def send_offer(
        self,
        partner: int | str,
        items: Sequence[int],
        message: str = "",
        token: str | None = None,
    ) -> Offer:
        """Send an offer to a uid (int, needs ``token``) or a SteamID64 (str)."""
        target = self._partner(partner)
        return await self.api.send_offer(
            target, items, self._one_time_code(), message=message, token=token,
        )

    async def accept_offer(self, offer_id: OfferId) -> Offer:
        return await self.api.accept_offer(offer_id, self._one_time_code())

    async def cancel_offer(self, offer_id: OfferId) -> Offer:
        return await self.api.cancel_offer(offer_id)

    async def get_inventory(self, app_id: int | None = None) -> list[dict[str, Any]]:
        """All items in our own inventory, across every page."""
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            result = await self.api.get_inventory(page=page, app_id=app_id)
            items.extend(result.items)
            if page + 1 > result.total_pages:
                return items
            page += 1

    async def get_user_inventory(
        self, user: int | str, app_id: int | None = None,
    ) -> list[dict[str, Any]]:
        """All items in another user's inventory, by uid or SteamID64."""
        target = self._partner(user)
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            result = await self.api.get_user_inventory(target, app_id=app_id, page=page)
            items.extend(result.items)
            if page + 1 > result.total_pages:
                return items
            page += 1
