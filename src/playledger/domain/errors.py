"""Domain error hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class PlayLedgerError(Exception):
    """Base class for errors raised by the play ledger."""


class NotFoundError(PlayLedgerError, LookupError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, kind: str, entity_id: UUID) -> None:
        super().__init__(f"{kind} not found: {entity_id}")
        self.kind = kind
        self.entity_id = entity_id


class ConflictError(PlayLedgerError):
    """A write collided with a concurrent write of the same row."""


class PlayConflictError(ConflictError):
    """A concurrent ingestion already claimed the same listener/track play."""


class StoreUnavailableError(PlayLedgerError):
    """The backing store failed; no partial result is available."""
