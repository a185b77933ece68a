"""Dashboard statistics for artists, admins and listeners."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Header

from playledger.api.dependencies import Services
from playledger.api.schemas import AdminStatsResponse, ArtistStatsResponse, ListenerStatsResponse

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("/artist", response_model=ArtistStatsResponse)
def artist_stats(
    services: Services,
    x_artist_id: Annotated[UUID, Header(description="Artist whose dashboard is requested")],
) -> ArtistStatsResponse:
    return ArtistStatsResponse.from_dashboard(services.stats.artist_dashboard(x_artist_id))


@router.get("/admin", response_model=AdminStatsResponse)
def admin_stats(services: Services) -> AdminStatsResponse:
    return AdminStatsResponse.from_dashboard(services.stats.admin_dashboard())


@router.get("/listener/{user_id}", response_model=ListenerStatsResponse)
def listener_stats(user_id: UUID, services: Services) -> ListenerStatsResponse:
    return ListenerStatsResponse(total_plays=services.stats.listener_total_plays(user_id))
