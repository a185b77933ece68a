"""Read-only stats entry points for the artist, admin and listener dashboards."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from playledger.config.stats import StatsConfig
from playledger.domain.ports import NullCollaborators
from playledger.domain.rollups import RollupAggregator
from playledger.domain.time_windows import utcnow

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from playledger.domain.model import ArtistRollup, DailyPlays, PlatformRollup, Track
    from playledger.domain.ports import DashboardCollaborators, LedgerUnitOfWork
    from playledger.domain.time_windows import Clock


@dataclass(slots=True, frozen=True)
class ArtistDashboard:
    rollup: ArtistRollup
    total_songs: int
    recent_uploads: tuple[Track, ...]
    pending_count: int
    followers_count: int
    following_count: int
    unread_notifications: int
    daily_plays: tuple[DailyPlays, ...] = field(default_factory=tuple)


@dataclass(slots=True, frozen=True)
class AdminDashboard:
    rollup: PlatformRollup
    recent_tracks: tuple[Track, ...]
    pending_verifications: int


class StatsFacade:
    def __init__(
        self,
        unit_of_work_factory: Callable[[], LedgerUnitOfWork],
        *,
        aggregator: RollupAggregator | None = None,
        collaborators: DashboardCollaborators | None = None,
        config: StatsConfig | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self.config = config or StatsConfig()
        self.aggregator = aggregator or RollupAggregator(unit_of_work_factory, config=self.config)
        self.collaborators = collaborators or NullCollaborators()
        self._clock = clock

    def artist_rollup(self, artist_id: UUID) -> ArtistRollup:
        return self.aggregator.artist_rollup(artist_id, self._clock())

    def platform_rollup(self) -> PlatformRollup:
        return self.aggregator.platform_rollup(self._clock())

    def listener_total_plays(self, listener_id: UUID) -> int:
        """Lifetime play events recorded for ``listener_id``; no time window applies."""

        with self._unit_of_work_factory() as uow:
            return uow.repositories.play_events.count_for_listener(listener_id)

    def artist_dashboard(self, artist_id: UUID) -> ArtistDashboard:
        now = self._clock()
        rollup = self.aggregator.artist_rollup(artist_id, now)
        daily = self.aggregator.daily_plays(artist_id, now)
        with self._unit_of_work_factory() as uow:
            tracks = list(uow.repositories.tracks.for_artist(artist_id))
        recent = sorted(tracks, key=lambda track: track.created_at, reverse=True)
        return ArtistDashboard(
            rollup=rollup,
            total_songs=len(tracks),
            recent_uploads=tuple(recent[: self.config.recent_uploads_limit]),
            pending_count=sum(1 for track in tracks if not track.is_public),
            followers_count=self.collaborators.followers_count(artist_id),
            following_count=self.collaborators.following_count(artist_id),
            unread_notifications=self.collaborators.unread_notifications(artist_id),
            daily_plays=tuple(daily),
        )

    def admin_dashboard(self) -> AdminDashboard:
        rollup = self.aggregator.platform_rollup(self._clock())
        with self._unit_of_work_factory() as uow:
            recent = tuple(uow.repositories.tracks.recent(limit=self.config.recent_uploads_limit))
        return AdminDashboard(
            rollup=rollup,
            recent_tracks=recent,
            pending_verifications=self.collaborators.pending_verifications(),
        )
