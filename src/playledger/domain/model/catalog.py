"""Catalog entities owned by external collaborators and read by the ledger."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from playledger.domain.model.base import CatalogEntity
from playledger.domain.model.enums import EntityType, UserType

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class User(CatalogEntity):
    """Account as seen by the rollups: identity, role and creation time only."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.USER

    display_name: str
    user_type: UserType = UserType.LISTENER


@dataclass(eq=False, kw_only=True)
class Track(CatalogEntity):
    """A published or pending track.

    ``play_count`` is only ever raised by the counter service; the domain object offers
    no way to lower it.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.TRACK

    title: str
    artist_id: UUID
    artist_name: str = ""
    is_public: bool = False
    play_count: int = 0

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.play_count < 0:
            raise ValueError("play_count must be non-negative")
