"""
Base building blocks:
ledger identity, and the creation time every catalog row carries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from playledger.domain.model.enums import EntityType


def new_id() -> UUID:
    return uuid4()


def utc_now() -> datetime:
    return datetime.now(UTC)


def require_aware(value: datetime, field_name: str) -> None:
    if value.tzinfo is None:
        raise ValueError(f"{field_name} must include timezone information")


@dataclass(eq=False, kw_only=True)
class Entity:
    """Ids are minted in the domain; the store never assigns them."""

    id: UUID = field(default_factory=new_id)

    ENTITY_TYPE: ClassVar[EntityType]

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE


@dataclass(eq=False, kw_only=True)
class CatalogEntity(Entity):
    """Users and tracks: owned elsewhere, counted by the rollups via ``created_at``."""

    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        require_aware(self.created_at, "created_at")
