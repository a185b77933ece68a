"""Dedup gate: decides whether a play counts toward a track's total."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from playledger.config.stats import DEFAULT_DEDUP_WINDOW_HOURS
from playledger.domain.time_windows import window_start

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from playledger.domain.ports import PlayEventRepository

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class DedupDecision:
    accept: bool


ACCEPT = DedupDecision(accept=True)
REPEAT = DedupDecision(accept=False)


class DedupGate:
    """Rolling-window repeat detection against the event store.

    The window is evaluated from ``now`` backwards in wall-clock time, not from midnight.
    A prior event exactly ``window`` old still counts as inside it.
    """

    def __init__(self, window: timedelta = timedelta(hours=DEFAULT_DEDUP_WINDOW_HOURS)) -> None:
        if window <= timedelta(0):
            raise ValueError("Dedup window must be positive")
        self.window = window

    def should_count(
        self,
        play_events: PlayEventRepository,
        *,
        listener_id: UUID | None,
        track_id: UUID,
        now: datetime,
    ) -> DedupDecision:
        if listener_id is None:
            return ACCEPT
        since = window_start(now, self.window)
        if play_events.exists_since(listener_id=listener_id, track_id=track_id, since=since):
            log.debug("Repeat play for listener=%s track=%s since %s", listener_id, track_id, since)
            return REPEAT
        return ACCEPT
