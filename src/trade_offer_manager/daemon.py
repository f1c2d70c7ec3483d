"""Daemon - runs the manager, logs its events and persists poll data."""

from __future__ import annotations

import asyncio
import logging
import signal

from trade_offer_manager.manager import TradeOfferManager
from trade_offer_manager.models.config import ManagerConfig
from trade_offer_manager.models.events import EventName
from trade_offer_manager.models.offers import Offer, OfferState, PollData, state_name
from trade_offer_manager.storage.sqlite import SQLiteSnapshotStore

log = logging.getLogger(__name__)


class OfferDaemon:
    """Long-running poller.

    Restores the snapshot from SQLite, starts the manager's scheduler and
    writes the snapshot back whenever a cycle changes it.
    """

    def __init__(self, cfg: ManagerConfig) -> None:
        self._cfg = cfg
        self._stopped = asyncio.Event()
        self.store = SQLiteSnapshotStore(cfg.db_path)
        self.manager: TradeOfferManager | None = None

    def build_manager(self, poll_data: PollData) -> TradeOfferManager:
        manager = TradeOfferManager(self._cfg, poll_data)
        self.attach(manager)
        return manager

    def attach(self, manager: TradeOfferManager) -> None:
        """Subscribe the daemon's logging and persistence listeners."""
        events = manager.events
        events.on(EventName.POLL_FAILURE, self._on_poll_failure)
        events.on(EventName.POLL_DATA, self._on_poll_data)
        events.on(EventName.NEW_OFFER, self._on_new_offer)
        events.on(EventName.UNKNOWN_OFFER_SENT, self._on_unknown_offer_sent)
        events.on(EventName.SENT_OFFER_CHANGED, self._on_sent_offer_changed)
        events.on(EventName.RECEIVED_OFFER_CHANGED, self._on_received_offer_changed)
        events.on(EventName.SENT_OFFER_CANCELED, self._on_sent_offer_canceled)
        self.manager = manager

    async def start(self) -> None:
        """Initialize storage and poll until stop() is called."""
        log.info("Starting trade offer daemon")
        log.info("  API: %s", self._cfg.api_url)
        log.info("  Poll interval: %dms", self._cfg.poll_interval)
        log.info(
            "  Auto-cancel: %s",
            f"{self._cfg.cancel_time}ms" if (self._cfg.cancel_time or 0) > 0 else "off",
        )

        await self.store.initialize()
        try:
            poll_data = await self.store.load()
            log.info(
                "Restored %d offers (cursor %d)",
                len(poll_data.offers), poll_data.offers_since,
            )
            manager = self.build_manager(poll_data)
            manager.start()
            await self._stopped.wait()
            manager.stop()
            await manager.scheduler.wait_idle()
            await manager.events.drain()
        finally:
            await self.store.close()
            log.info("Daemon shut down cleanly")

    async def stop(self) -> None:
        log.info("Stop requested")
        self._stopped.set()

    # ── Listeners ─────────────────────────────────────────

    def _on_poll_failure(self, error: Exception) -> None:
        log.warning("Poll failed: %s", error)

    async def _on_poll_data(self, snapshot: PollData) -> None:
        await self.store.save(snapshot)
        log.debug("Saved poll data (%d offers)", len(snapshot.offers))

    def _on_new_offer(self, offer: Offer) -> None:
        log.info("New offer #%s received", offer.id)

    def _on_unknown_offer_sent(self, offer: Offer) -> None:
        log.info("Sent offer #%s was not created by this manager", offer.id)

    def _on_sent_offer_changed(self, offer: Offer, old_state: OfferState | int) -> None:
        log.info(
            "Sent offer #%s: %s -> %s",
            offer.id, state_name(old_state), state_name(offer.state),
        )

    def _on_received_offer_changed(self, offer: Offer, old_state: OfferState | int) -> None:
        log.info(
            "Received offer #%s: %s -> %s",
            offer.id, state_name(old_state), state_name(offer.state),
        )

    def _on_sent_offer_canceled(self, offer: Offer, reason: str) -> None:
        log.info("Canceled sent offer #%s (%s)", offer.id, reason)


async def run_daemon(cfg: ManagerConfig) -> None:
    """Entry point for running the daemon."""
    daemon = OfferDaemon(cfg)

    loop = asyncio.get_running_loop()

    def _signal_handler():
        asyncio.ensure_future(daemon.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            pass

    await daemon.start()
