"""Request and response bodies for the HTTP adapter (camelCase on the wire)."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from playledger.domain.model import DailyPlays, Track
    from playledger.domain.stats import AdminDashboard, ArtistDashboard


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlayRequest(CamelModel):
    listener_id: UUID | None = Field(
        default=None,
        description="Authenticated listener; omit for anonymous playback",
    )


class PlayResponse(CamelModel):
    plays: int
    counted: bool


class TrackSchema(CamelModel):
    id: UUID
    title: str
    artist_id: UUID
    artist_name: str
    is_public: bool
    created_at: datetime
    plays: int

    @classmethod
    def from_track(cls, track: Track) -> TrackSchema:
        return cls(
            id=track.id,
            title=track.title,
            artist_id=track.artist_id,
            artist_name=track.artist_name,
            is_public=track.is_public,
            created_at=track.created_at,
            plays=track.play_count,
        )


class DailyPlaysSchema(CamelModel):
    day: date
    plays: int

    @classmethod
    def from_daily(cls, daily: DailyPlays) -> DailyPlaysSchema:
        return cls(day=daily.day, plays=daily.plays)


class ArtistStatsResponse(CamelModel):
    total_plays: int
    followers_count: int
    following_count: int
    monthly_listeners: int
    total_songs: int
    top_songs: list[TrackSchema]
    recent_uploads: list[TrackSchema]
    pending_count: int
    unread_notifications: int
    daily_plays: list[DailyPlaysSchema] = Field(default_factory=list)

    @classmethod
    def from_dashboard(cls, dashboard: ArtistDashboard) -> ArtistStatsResponse:
        rollup = dashboard.rollup
        return cls(
            total_plays=rollup.total_plays,
            followers_count=dashboard.followers_count,
            following_count=dashboard.following_count,
            monthly_listeners=rollup.monthly_listeners,
            total_songs=dashboard.total_songs,
            top_songs=[TrackSchema.from_track(track) for track in rollup.top_tracks],
            recent_uploads=[TrackSchema.from_track(track) for track in dashboard.recent_uploads],
            pending_count=dashboard.pending_count,
            unread_notifications=dashboard.unread_notifications,
            daily_plays=[DailyPlaysSchema.from_daily(day) for day in dashboard.daily_plays],
        )


class AdminStatsResponse(CamelModel):
    total_plays: int
    pending_approval: int
    new_users_today: int
    new_music_today: int
    total_users: int
    total_artists: int
    total_listeners: int
    total_music: int
    pending_verifications: int
    recent_music: list[TrackSchema]

    @classmethod
    def from_dashboard(cls, dashboard: AdminDashboard) -> AdminStatsResponse:
        rollup = dashboard.rollup
        return cls(
            total_plays=rollup.total_plays,
            pending_approval=rollup.pending_approval,
            new_users_today=rollup.new_users_today,
            new_music_today=rollup.new_tracks_today,
            total_users=rollup.total_users,
            total_artists=rollup.total_artists,
            total_listeners=rollup.total_listeners,
            total_music=rollup.total_tracks,
            pending_verifications=dashboard.pending_verifications,
            recent_music=[TrackSchema.from_track(track) for track in dashboard.recent_tracks],
        )


class ListenerStatsResponse(CamelModel):
    total_plays: int


class HealthResponse(BaseModel):
    status: str = "ok"
