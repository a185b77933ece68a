"""Play events: the append-only record behind every counted play."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from playledger.domain.model.base import Entity, require_aware
from playledger.domain.model.enums import EntityType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class PlayEvent(Entity):
    """One listener's (or an anonymous session's) playback of one track at one instant.

    ``occurred_at`` comes from the server clock at ingestion. Anonymous plays carry no
    ``listener_id`` and never take part in dedup or distinct-listener counts.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.PLAY_EVENT

    track_id: UUID
    occurred_at: datetime
    listener_id: UUID | None = None

    def __post_init__(self) -> None:
        require_aware(self.occurred_at, "occurred_at")

    @property
    def is_anonymous(self) -> bool:
        return self.listener_id is None
