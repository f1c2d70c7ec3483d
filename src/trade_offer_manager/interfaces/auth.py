"""Credential collaborators: one-time codes and user identifier validation."""

from __future__ import annotations

from typing import Protocol


class OneTimeCodeSource(Protocol):
    """Produces the time-based one-time code required to send or accept offers."""

    def code(self) -> str:
        ...


class IdentifierValidator(Protocol):
    """Validates platform user identifiers before they reach the API."""

    def validate(self, value: str) -> str:
        """Return the normalized identifier or raise InvalidIdentifierError."""
        ...
