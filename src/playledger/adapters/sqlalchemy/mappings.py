"""SQLAlchemy mapping metadata for the playledger domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import Final

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    String,
    Table,
    TypeDecorator,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from playledger.domain.model import PlayEvent, Track, User, UserType

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

PLATFORM_TOTAL_PLAYS: Final[str] = "total_plays"


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

# Catalog read model ----------------------------------------------------------

user_table = Table(
    "user_account",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("display_name", String, nullable=False),
    Column("user_type", Enum(UserType, native_enum=False), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_user_account_created_at", "created_at"),
)

track_table = Table(
    "track",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("title", String, nullable=False),
    Column("artist_id", UUIDColumnType, nullable=False),
    Column("artist_name", String, nullable=False, default=""),
    Column("is_public", Boolean, nullable=False, default=False),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("play_count", Integer, nullable=False, default=0),
    Index("ix_track_artist_id", "artist_id"),
    Index("ix_track_play_count", "play_count"),
    Index("ix_track_created_at", "created_at"),
)

# Ledger ----------------------------------------------------------------------

play_event_table = Table(
    "play_event",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("track_id", UUIDColumnType, nullable=False),
    Column("listener_id", UUIDColumnType, nullable=True),
    Column("occurred_at", UTCDateTime(), nullable=False),
    Index("ix_play_event_listener_track_time", "listener_id", "track_id", "occurred_at"),
    Index("ix_play_event_track_time", "track_id", "occurred_at"),
)

dedup_claim_table = Table(
    "dedup_claim",
    mapper_registry.metadata,
    Column("listener_id", UUIDColumnType, primary_key=True),
    Column("track_id", UUIDColumnType, primary_key=True),
    Column("claimed_at", UTCDateTime(), nullable=False),
)

platform_counter_table = Table(
    "platform_counter",
    mapper_registry.metadata,
    Column("name", String, primary_key=True),
    Column("value", Integer, nullable=False, default=0),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(User, user_table)
    mapper_registry.map_imperatively(Track, track_table)
    mapper_registry.map_imperatively(PlayEvent, play_event_table)

    configure_mappers()
    return mapper_registry
