"""Counter service: the only writer of track play counts and the platform total."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from playledger.domain.model import Track
    from playledger.domain.ports import LedgerRepositories, LedgerUnitOfWork

log = logging.getLogger(__name__)


class CounterService:
    """Applies exactly one atomic increment per accepted play.

    The platform running total moves in the same transaction as the track counter so
    that it always equals the sum of all track counters.
    """

    def increment(self, repositories: LedgerRepositories, track_id: UUID) -> int:
        new_total = repositories.counters.increment_track(track_id)
        repositories.counters.add_platform_total(1)
        return new_total

    def register_track(self, repositories: LedgerRepositories, track: Track) -> None:
        """Add a catalog track, carrying any pre-existing count into the platform total."""

        repositories.tracks.add(track)
        if track.play_count:
            repositories.counters.add_platform_total(track.play_count)

    def reconcile_platform_total(
        self,
        unit_of_work_factory: Callable[[], LedgerUnitOfWork],
    ) -> int:
        """Recompute the running total from every track counter (full scan)."""

        with unit_of_work_factory() as uow:
            counters = uow.repositories.counters
            previous = counters.platform_total()
            actual = uow.repositories.tracks.sum_play_counts()
            if actual != previous:
                log.warning("Platform total drifted: stored=%s actual=%s", previous, actual)
                counters.set_platform_total(actual)
                uow.commit()
        return actual
