"""Derived aggregates. Computed on read, never persisted."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

    from playledger.domain.model.catalog import Track


@dataclass(slots=True, frozen=True)
class ArtistRollup:
    artist_id: UUID
    total_plays: int
    monthly_listeners: int
    top_tracks: tuple[Track, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class PlatformRollup:
    total_plays: int
    new_users_today: int
    new_tracks_today: int
    total_users: int = 0
    total_artists: int = 0
    total_listeners: int = 0
    total_tracks: int = 0
    pending_approval: int = 0


@dataclass(slots=True, frozen=True)
class DailyPlays:
    day: date
    plays: int
