"""Play ingestion: dedup check, event append and counter increment as one step."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from playledger.domain.counters import CounterService
from playledger.domain.dedup import DedupGate
from playledger.domain.errors import ConflictError, NotFoundError, PlayConflictError
from playledger.domain.locking import KeyedLocks
from playledger.domain.model import EntityType, PlayEvent
from playledger.domain.time_windows import utcnow

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from playledger.domain.ports import LedgerUnitOfWork
    from playledger.domain.time_windows import Clock

log = logging.getLogger(__name__)

MAX_ATTEMPTS = 2


@dataclass(slots=True, frozen=True)
class RecordPlayResult:
    """Outcome of a play report. ``counted=False`` is the normal repeat outcome."""

    new_total: int
    counted: bool


class PlayIngestion:
    """Records plays reported by playback clients.

    The timestamp always comes from ``clock``; clients cannot move a play into or out of
    the dedup or monthly-listener windows. Calls for the same listener/track pair are
    serialized in-process by ``locks``; across processes the dedup claim held by the
    store rejects the second writer with :class:`PlayConflictError`.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], LedgerUnitOfWork],
        *,
        gate: DedupGate | None = None,
        counters: CounterService | None = None,
        clock: Clock = utcnow,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self.gate = gate or DedupGate()
        self.counters = counters or CounterService()
        self._clock = clock
        self._locks = locks or KeyedLocks()

    def record_play(self, track_id: UUID, listener_id: UUID | None = None) -> RecordPlayResult:
        if listener_id is None:
            return self._attempt(track_id, None)

        with self._locks.hold((listener_id, track_id)):
            for attempt in range(1, MAX_ATTEMPTS + 1):
                try:
                    return self._attempt(track_id, listener_id)
                except ConflictError:
                    log.info(
                        "Concurrent play claimed listener=%s track=%s (attempt %s/%s)",
                        listener_id,
                        track_id,
                        attempt,
                        MAX_ATTEMPTS,
                    )
            return RecordPlayResult(new_total=self._current_total(track_id), counted=False)

    def _attempt(self, track_id: UUID, listener_id: UUID | None) -> RecordPlayResult:
        now = self._clock()
        with self._unit_of_work_factory() as uow:
            repositories = uow.repositories
            track = repositories.tracks.get(track_id)
            if track is None:
                raise NotFoundError(EntityType.TRACK, track_id)

            decision = self.gate.should_count(
                repositories.play_events,
                listener_id=listener_id,
                track_id=track_id,
                now=now,
            )
            if not decision.accept:
                return RecordPlayResult(new_total=track.play_count, counted=False)

            if listener_id is not None and not repositories.claims.claim(
                listener_id=listener_id,
                track_id=track_id,
                now=now,
                window=self.gate.window,
            ):
                raise PlayConflictError(f"play already claimed for {listener_id}/{track_id}")

            repositories.play_events.add(
                PlayEvent(track_id=track_id, listener_id=listener_id, occurred_at=now)
            )
            new_total = self.counters.increment(repositories, track_id)
            uow.commit()

        log.debug("Counted play track=%s listener=%s total=%s", track_id, listener_id, new_total)
        return RecordPlayResult(new_total=new_total, counted=True)

    def _current_total(self, track_id: UUID) -> int:
        with self._unit_of_work_factory() as uow:
            track = uow.repositories.tracks.get(track_id)
            if track is None:
                raise NotFoundError(EntityType.TRACK, track_id)
            return track.play_count
