"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class EntityType(StrEnum):
    """Discriminator for entities the ledger reads or writes."""

    USER = "user"
    TRACK = "track"
    PLAY_EVENT = "play_event"


class UserType(StrEnum):
    ADMIN = "ADMIN"
    ARTIST = "ARTIST"
    LISTENER = "LISTENER"
    GUEST = "GUEST"
