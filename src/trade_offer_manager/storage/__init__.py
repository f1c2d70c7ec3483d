"""Snapshot persistence used by the daemon."""

from trade_offer_manager.storage.sqlite import SQLiteSnapshotStore

__all__ = ["SQLiteSnapshotStore"]
