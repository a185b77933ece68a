"""Play ingestion and the trending feed."""

from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Query

from playledger.api.dependencies import Services
from playledger.api.schemas import PlayRequest, PlayResponse, TrackSchema

MAX_TRENDING_LIMIT = 100

router = APIRouter(prefix="/tracks", tags=["Tracks"])
log = logging.getLogger(__name__)


@router.get("/trending", response_model=list[TrackSchema])
def trending_tracks(
    services: Services,
    limit: Annotated[int | None, Query(ge=0, le=MAX_TRENDING_LIMIT)] = None,
) -> list[TrackSchema]:
    return [TrackSchema.from_track(track) for track in services.trending.trending(limit)]


@router.post("/{track_id}/play", response_model=PlayResponse)
def record_play(
    track_id: UUID,
    services: Services,
    body: Annotated[PlayRequest | None, Body()] = None,
) -> PlayResponse:
    listener_id = body.listener_id if body is not None else None
    result = services.ingestion.record_play(track_id, listener_id)
    if not result.counted:
        log.debug("Play not counted track=%s listener=%s", track_id, listener_id)
    return PlayResponse(plays=result.new_total, counted=result.counted)
