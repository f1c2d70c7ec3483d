"""SQLite implementation of the SnapshotStore protocol."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from trade_offer_manager.models.offers import Offer, PollData

SCHEMA = """
-- Offer update cursor for resumption
CREATE TABLE IF NOT EXISTS cursor (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    offers_since INTEGER NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

-- Every offer seen so far, last known version
CREATE TABLE IF NOT EXISTS offers (
    offer_id TEXT PRIMARY KEY,
    state INTEGER NOT NULL,
    sent_by_you INTEGER NOT NULL,
    time_created INTEGER NOT NULL,
    time_updated INTEGER NOT NULL,
    data TEXT NOT NULL,
    saved_at TEXT NOT NULL DEFAULT (datetime('now'))
);
CREATE INDEX IF NOT EXISTS idx_offers_state ON offers(state);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SQLiteSnapshotStore:
    """SQLite-backed storage for the poll snapshot.

    The manager itself keeps poll data in memory only; the daemon uses this
    store to restore it on startup and save it on every ``poll_data`` event.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._db_path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(SCHEMA)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        assert self._db is not None, "Store not initialized"
        return self._db

    async def load(self) -> PollData:
        snapshot = PollData()
        async with self.db.execute("SELECT offers_since FROM cursor WHERE id = 1") as cur:
            row = await cur.fetchone()
            if row:
                snapshot.offers_since = row["offers_since"]

        async with self.db.execute("SELECT data FROM offers ORDER BY rowid") as cur:
            async for row in cur:
                offer = Offer.from_api(json.loads(row["data"]))
                snapshot.offers[offer.id] = offer
        return snapshot

    async def save(self, snapshot: PollData) -> None:
        now = _now()
        await self.db.execute(
            """INSERT INTO cursor (id, offers_since, updated_at) VALUES (1, ?, ?)
               ON CONFLICT(id) DO UPDATE SET offers_since = excluded.offers_since,
                                             updated_at = excluded.updated_at""",
            (snapshot.offers_since, now),
        )
        await self.db.executemany(
            """INSERT INTO offers
                   (offer_id, state, sent_by_you, time_created, time_updated, data, saved_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)
               ON CONFLICT(offer_id) DO UPDATE SET
                   state = excluded.state,
                   sent_by_you = excluded.sent_by_you,
                   time_created = excluded.time_created,
                   time_updated = excluded.time_updated,
                   data = excluded.data,
                   saved_at = excluded.saved_at""",
            [
                (
                    str(offer.id),
                    int(offer.state),
                    int(offer.sent_by_you),
                    offer.time_created,
                    offer.time_updated,
                    json.dumps(offer.to_api()),
                    now,
                )
                for offer in snapshot.offers.values()
            ],
        )
        await self.db.commit()
