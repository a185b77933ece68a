"""Rollup aggregator: windowed per-artist and platform-wide aggregates."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import timedelta
from typing import TYPE_CHECKING

from playledger.config.stats import StatsConfig
from playledger.domain.model import ArtistRollup, DailyPlays, PlatformRollup, UserType
from playledger.domain.time_windows import (
    day_start,
    local_day,
    local_midnight,
    trailing_window,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime
    from uuid import UUID

    from playledger.domain.model import Track
    from playledger.domain.ports import LedgerUnitOfWork

log = logging.getLogger(__name__)


def rank_top_tracks(tracks: Sequence[Track], limit: int) -> tuple[Track, ...]:
    """Highest ``play_count`` first; ties go to the most recently created track.

    Track id is the last resort so equal counts and creation times still page stably.
    """

    by_id = sorted(tracks, key=lambda track: track.id)
    by_created = sorted(by_id, key=lambda track: track.created_at, reverse=True)
    by_plays = sorted(by_created, key=lambda track: track.play_count, reverse=True)
    return tuple(by_plays[:limit])


class RollupAggregator:
    """Computes dashboard aggregates on demand.

    Every call runs in its own short unit of work, so results reflect a recent committed
    snapshot and never block ingestion.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], LedgerUnitOfWork],
        *,
        config: StatsConfig | None = None,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self.config = config or StatsConfig()

    def artist_rollup(
        self,
        artist_id: UUID,
        now: datetime,
        *,
        top_n: int | None = None,
    ) -> ArtistRollup:
        limit = self.config.top_tracks_limit if top_n is None else top_n
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            tracks = list(repositories.tracks.for_artist(artist_id))
            if not tracks:
                return ArtistRollup(artist_id=artist_id, total_plays=0, monthly_listeners=0)

            start, end = trailing_window(now, self.config.monthly_window)
            monthly_listeners = repositories.play_events.distinct_listeners(
                track_ids=[track.id for track in tracks],
                start=start,
                end=end,
            )

        return ArtistRollup(
            artist_id=artist_id,
            total_plays=sum(track.play_count for track in tracks),
            monthly_listeners=monthly_listeners,
            top_tracks=rank_top_tracks(tracks, limit),
        )

    def platform_rollup(self, now: datetime) -> PlatformRollup:
        midnight = local_midnight(now, self.config.timezone)
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            return PlatformRollup(
                total_plays=repositories.counters.platform_total(),
                new_users_today=repositories.users.count_created_since(midnight),
                new_tracks_today=repositories.tracks.count_created_since(midnight),
                total_users=repositories.users.count(),
                total_artists=repositories.users.count(user_type=UserType.ARTIST),
                total_listeners=repositories.users.count(user_type=UserType.LISTENER),
                total_tracks=repositories.tracks.count(),
                pending_approval=repositories.tracks.count(is_public=False),
            )

    def daily_plays(
        self,
        artist_id: UUID,
        now: datetime,
        *,
        days: int | None = None,
    ) -> list[DailyPlays]:
        """Accepted plays per local calendar day, oldest first, today included."""

        span = self.config.daily_plays_days if days is None else days
        if span < 1:
            raise ValueError("days must be at least 1")
        tz = self.config.timezone
        # step on calendar dates; a DST day is 23 or 25 hours long
        today = local_day(now, tz)
        calendar = [today - timedelta(days=offset) for offset in range(span - 1, -1, -1)]
        first_midnight = day_start(calendar[0], tz)

        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            track_ids = [track.id for track in repositories.tracks.for_artist(artist_id)]
            if not track_ids:
                return [DailyPlays(day=day, plays=0) for day in calendar]
            occurrences = repositories.play_events.occurrences(
                track_ids=track_ids,
                start=first_midnight,
                end=now,
            )

        per_day = Counter(local_day(instant, tz) for instant in occurrences)
        return [DailyPlays(day=day, plays=per_day.get(day, 0)) for day in calendar]
