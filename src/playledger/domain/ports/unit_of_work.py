"""Transaction boundary the ledger services run every read and write inside."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from playledger.domain.ports.persistence import (
        DedupClaimRepository,
        PlayCounterRepository,
        PlayEventRepository,
        TrackRepository,
        UserRepository,
    )


@dataclass(slots=True)
class LedgerRepositories:
    """Repositories bound to one unit of work's transaction."""

    play_events: PlayEventRepository
    tracks: TrackRepository
    users: UserRepository
    counters: PlayCounterRepository
    claims: DedupClaimRepository


@runtime_checkable
class LedgerUnitOfWork(Protocol):
    """One transaction over :class:`LedgerRepositories`.

    Nothing is persisted unless ``commit`` is called before the block exits; leaving the
    block with an exception rolls back. Adapters translate store failures on exit into
    :class:`~playledger.domain.errors.ConflictError` or
    :class:`~playledger.domain.errors.StoreUnavailableError`.
    """

    @property
    def repositories(self) -> LedgerRepositories: ...

    def __enter__(self) -> LedgerUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
