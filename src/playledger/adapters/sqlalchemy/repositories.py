"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, cast

from sqlalchemy import distinct, func, insert, select, update
from sqlalchemy.exc import IntegrityError

from playledger.adapters.sqlalchemy.mappings import (
    PLATFORM_TOTAL_PLAYS,
    dedup_claim_table,
    platform_counter_table,
    play_event_table,
    track_table,
    user_table,
)
from playledger.domain.errors import NotFoundError, PlayConflictError
from playledger.domain.model import EntityType, PlayEvent, Track, User
from playledger.domain.time_windows import window_start

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence
    from datetime import datetime, timedelta
    from uuid import UUID

    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session

    from playledger.domain.model import UserType

log = logging.getLogger(__name__)


class SqlAlchemyPlayEventRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: PlayEvent) -> None:
        self.session.add(entity)

    def exists_since(self, *, listener_id: UUID, track_id: UUID, since: datetime) -> bool:
        stmt = (
            select(play_event_table.c.id)
            .select_from(PlayEvent)
            .where(play_event_table.c.listener_id == listener_id)
            .where(play_event_table.c.track_id == track_id)
            .where(play_event_table.c.occurred_at >= since)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none() is not None

    def count_for_listener(self, listener_id: UUID) -> int:
        stmt = (
            select(func.count(play_event_table.c.id))
            .select_from(PlayEvent)
            .where(play_event_table.c.listener_id == listener_id)
        )
        return self.session.execute(stmt).scalar_one()

    def distinct_listeners(
        self,
        *,
        track_ids: Collection[UUID],
        start: datetime,
        end: datetime,
    ) -> int:
        if not track_ids:
            return 0
        stmt = (
            select(func.count(distinct(play_event_table.c.listener_id)))
            .select_from(PlayEvent)
            .where(play_event_table.c.track_id.in_(list(track_ids)))
            .where(play_event_table.c.listener_id.is_not(None))
            .where(play_event_table.c.occurred_at >= start)
            .where(play_event_table.c.occurred_at <= end)
        )
        return self.session.execute(stmt).scalar_one()

    def occurrences(
        self,
        *,
        track_ids: Collection[UUID],
        start: datetime,
        end: datetime,
    ) -> Sequence[datetime]:
        if not track_ids:
            return []
        stmt = (
            select(play_event_table.c.occurred_at)
            .select_from(PlayEvent)
            .where(play_event_table.c.track_id.in_(list(track_ids)))
            .where(play_event_table.c.occurred_at >= start)
            .where(play_event_table.c.occurred_at <= end)
            .order_by(play_event_table.c.occurred_at)
        )
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyTrackRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Track) -> None:
        self.session.add(entity)

    def get(self, track_id: UUID) -> Track | None:
        return self.session.get(Track, track_id)

    def for_artist(self, artist_id: UUID) -> Sequence[Track]:
        stmt = select(Track).where(track_table.c.artist_id == artist_id)
        return self.session.execute(stmt).scalars().all()

    def ranked(self, *, limit: int, offset: int = 0) -> Sequence[Track]:
        stmt = (
            select(Track)
            .where(track_table.c.is_public.is_(True))
            .order_by(track_table.c.play_count.desc(), track_table.c.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return self.session.execute(stmt).scalars().all()

    def recent(self, *, limit: int) -> Sequence[Track]:
        stmt = (
            select(Track)
            .order_by(track_table.c.created_at.desc(), track_table.c.id.asc())
            .limit(limit)
        )
        return self.session.execute(stmt).scalars().all()

    def count(self, *, is_public: bool | None = None) -> int:
        stmt = select(func.count(track_table.c.id)).select_from(Track)
        if is_public is not None:
            stmt = stmt.where(track_table.c.is_public.is_(is_public))
        return self.session.execute(stmt).scalar_one()

    def count_created_since(self, since: datetime) -> int:
        stmt = (
            select(func.count(track_table.c.id))
            .select_from(Track)
            .where(track_table.c.created_at >= since)
        )
        return self.session.execute(stmt).scalar_one()

    def sum_play_counts(self) -> int:
        stmt = select(func.coalesce(func.sum(track_table.c.play_count), 0)).select_from(Track)
        return int(self.session.execute(stmt).scalar_one())


class SqlAlchemyUserRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: User) -> None:
        self.session.add(entity)

    def count(self, *, user_type: UserType | None = None) -> int:
        stmt = select(func.count(user_table.c.id)).select_from(User)
        if user_type is not None:
            stmt = stmt.where(user_table.c.user_type == user_type)
        return self.session.execute(stmt).scalar_one()

    def count_created_since(self, since: datetime) -> int:
        stmt = (
            select(func.count(user_table.c.id))
            .select_from(User)
            .where(user_table.c.created_at >= since)
        )
        return self.session.execute(stmt).scalar_one()


class SqlAlchemyPlayCounterRepository:
    """Counters updated with ``SET x = x + n`` so concurrent writers never lose updates."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def increment_track(self, track_id: UUID) -> int:
        stmt = (
            update(track_table)
            .where(track_table.c.id == track_id)
            .values(play_count=track_table.c.play_count + 1)
        )
        result = cast("CursorResult[object]", self.session.execute(stmt))
        if result.rowcount == 0:
            raise NotFoundError(EntityType.TRACK, track_id)
        current = select(track_table.c.play_count).where(track_table.c.id == track_id)
        return self.session.execute(current).scalar_one()

    def platform_total(self) -> int:
        stmt = select(platform_counter_table.c.value).where(
            platform_counter_table.c.name == PLATFORM_TOTAL_PLAYS
        )
        return self.session.execute(stmt).scalar_one_or_none() or 0

    def add_platform_total(self, delta: int) -> None:
        stmt = (
            update(platform_counter_table)
            .where(platform_counter_table.c.name == PLATFORM_TOTAL_PLAYS)
            .values(value=platform_counter_table.c.value + delta)
        )
        result = cast("CursorResult[object]", self.session.execute(stmt))
        if result.rowcount == 0:
            self._insert_total(delta)

    def set_platform_total(self, value: int) -> None:
        stmt = (
            update(platform_counter_table)
            .where(platform_counter_table.c.name == PLATFORM_TOTAL_PLAYS)
            .values(value=value)
        )
        result = cast("CursorResult[object]", self.session.execute(stmt))
        if result.rowcount == 0:
            self._insert_total(value)

    def _insert_total(self, value: int) -> None:
        log.info("Seeding platform counter %s=%s", PLATFORM_TOTAL_PLAYS, value)
        self.session.execute(
            insert(platform_counter_table).values(name=PLATFORM_TOTAL_PLAYS, value=value)
        )


class SqlAlchemyDedupClaimRepository:
    """One row per listener/track holding the instant of the last accepted play.

    The primary key makes a second concurrent first-time claim fail at insert time; an
    existing claim is only moved forward by a conditional update once it left the window.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def claim(
        self,
        *,
        listener_id: UUID,
        track_id: UUID,
        now: datetime,
        window: timedelta,
    ) -> bool:
        cutoff = window_start(now, window)
        refresh = (
            update(dedup_claim_table)
            .where(dedup_claim_table.c.listener_id == listener_id)
            .where(dedup_claim_table.c.track_id == track_id)
            .where(dedup_claim_table.c.claimed_at < cutoff)
            .values(claimed_at=now)
        )
        result = cast("CursorResult[object]", self.session.execute(refresh))
        if result.rowcount:
            return True

        existing = (
            select(dedup_claim_table.c.claimed_at)
            .where(dedup_claim_table.c.listener_id == listener_id)
            .where(dedup_claim_table.c.track_id == track_id)
        )
        if self.session.execute(existing).scalar_one_or_none() is not None:
            return False

        try:
            self.session.execute(
                insert(dedup_claim_table).values(
                    listener_id=listener_id,
                    track_id=track_id,
                    claimed_at=now,
                )
            )
        except IntegrityError as exc:
            raise PlayConflictError(
                f"play already claimed for {listener_id}/{track_id}"
            ) from exc
        return True


if TYPE_CHECKING:
    from playledger.domain.ports.persistence import (
        DedupClaimRepository,
        PlayCounterRepository,
        PlayEventRepository,
        TrackRepository,
        UserRepository,
    )

    _session_stub = cast("Session", object())
    _event_repo: PlayEventRepository = SqlAlchemyPlayEventRepository(_session_stub)
    _track_repo: TrackRepository = SqlAlchemyTrackRepository(_session_stub)
    _user_repo: UserRepository = SqlAlchemyUserRepository(_session_stub)
    _counter_repo: PlayCounterRepository = SqlAlchemyPlayCounterRepository(_session_stub)
    _claim_repo: DedupClaimRepository = SqlAlchemyDedupClaimRepository(_session_stub)
