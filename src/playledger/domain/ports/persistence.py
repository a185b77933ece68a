"""Ports for persisting play events, counters and the catalog read model."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from playledger.domain.model import PlayEvent, Track, User

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from datetime import datetime, timedelta
    from uuid import UUID

    from playledger.domain.model import UserType

TEntity = TypeVar("TEntity")


@runtime_checkable
class Repository(Protocol[TEntity]):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class PlayEventRepository(Repository[PlayEvent], Protocol):
    """Append-only event store."""

    def exists_since(self, *, listener_id: UUID, track_id: UUID, since: datetime) -> bool: ...

    def count_for_listener(self, listener_id: UUID) -> int: ...

    def distinct_listeners(
        self,
        *,
        track_ids: Collection[UUID],
        start: datetime,
        end: datetime,
    ) -> int: ...

    def occurrences(
        self,
        *,
        track_ids: Collection[UUID],
        start: datetime,
        end: datetime,
    ) -> Sequence[datetime]: ...


@runtime_checkable
class TrackRepository(Repository[Track], Protocol):
    """Read model over the external track catalog."""

    def get(self, track_id: UUID) -> Track | None: ...

    def for_artist(self, artist_id: UUID) -> Sequence[Track]: ...

    def ranked(self, *, limit: int, offset: int = 0) -> Sequence[Track]: ...

    def recent(self, *, limit: int) -> Sequence[Track]: ...

    def count(self, *, is_public: bool | None = None) -> int: ...

    def count_created_since(self, since: datetime) -> int: ...

    def sum_play_counts(self) -> int: ...


@runtime_checkable
class UserRepository(Repository[User], Protocol):
    """Read model over the external user directory."""

    def count(self, *, user_type: UserType | None = None) -> int: ...

    def count_created_since(self, since: datetime) -> int: ...


@runtime_checkable
class PlayCounterRepository(Protocol):
    """Atomic counters: per-track play counts and the platform running total."""

    def increment_track(self, track_id: UUID) -> int: ...

    def platform_total(self) -> int: ...

    def add_platform_total(self, delta: int) -> None: ...

    def set_platform_total(self, value: int) -> None: ...


@runtime_checkable
class DedupClaimRepository(Protocol):
    """Per listener/track claim that serializes accepted plays inside the dedup window."""

    def claim(
        self,
        *,
        listener_id: UUID,
        track_id: UUID,
        now: datetime,
        window: timedelta,
    ) -> bool: ...
