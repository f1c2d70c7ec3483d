"""SnapshotStore protocol - optional durability for poll data, owned by the caller."""

from __future__ import annotations

from typing import Protocol

from trade_offer_manager.models.offers import PollData


class SnapshotStore(Protocol):
    """Persists the poll snapshot across process restarts."""

    async def initialize(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def load(self) -> PollData:
        """Return the last saved snapshot, or an empty one."""
        ...

    async def save(self, snapshot: PollData) -> None:
        ...
