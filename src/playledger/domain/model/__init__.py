"""Public domain model surface."""

from __future__ import annotations

from playledger.domain.model.base import CatalogEntity, Entity, new_id
from playledger.domain.model.catalog import Track, User
from playledger.domain.model.enums import EntityType, UserType
from playledger.domain.model.play import PlayEvent
from playledger.domain.model.rollups import ArtistRollup, DailyPlays, PlatformRollup

__all__ = [
    "ArtistRollup",
    "CatalogEntity",
    "DailyPlays",
    "Entity",
    "EntityType",
    "PlatformRollup",
    "PlayEvent",
    "Track",
    "User",
    "UserType",
    "new_id",
]
