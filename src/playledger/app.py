"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from playledger.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from playledger.config.stats import StatsConfig, get_stats_config
from playledger.domain.counters import CounterService
from playledger.domain.dedup import DedupGate
from playledger.domain.ingestion import PlayIngestion
from playledger.domain.locking import KeyedLocks
from playledger.domain.model import Track, User, UserType
from playledger.domain.ports.unit_of_work import LedgerUnitOfWork
from playledger.domain.rollups import RollupAggregator
from playledger.domain.stats import StatsFacade
from playledger.domain.time_windows import utcnow
from playledger.domain.trending import TrendingRanker

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from playledger.domain.ports import DashboardCollaborators
    from playledger.domain.time_windows import Clock

UnitOfWorkFactory = Callable[[], LedgerUnitOfWork]


log = getLogger(__name__)


@dataclass(slots=True)
class LedgerServices:
    """The ledger components wired against one unit-of-work factory."""

    unit_of_work_factory: UnitOfWorkFactory
    config: StatsConfig
    counters: CounterService
    ingestion: PlayIngestion
    aggregator: RollupAggregator
    stats: StatsFacade
    trending: TrendingRanker

    def reconcile_platform_total(self) -> int:
        return self.counters.reconcile_platform_total(self.unit_of_work_factory)


def _ensure_started(unit_of_work_factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if unit_of_work_factory is not None:
        return unit_of_work_factory
    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def build_services(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: StatsConfig | None = None,
    clock: Clock = utcnow,
    collaborators: DashboardCollaborators | None = None,
    locks: KeyedLocks | None = None,
) -> LedgerServices:
    """Wire ingestion, rollups, trending and stats against the configured store."""

    effective_uow = _ensure_started(unit_of_work_factory)
    effective_config = config or get_stats_config()
    counters = CounterService()
    aggregator = RollupAggregator(effective_uow, config=effective_config)
    services = LedgerServices(
        unit_of_work_factory=effective_uow,
        config=effective_config,
        counters=counters,
        ingestion=PlayIngestion(
            effective_uow,
            gate=DedupGate(window=effective_config.dedup_window),
            counters=counters,
            clock=clock,
            locks=locks,
        ),
        aggregator=aggregator,
        stats=StatsFacade(
            effective_uow,
            aggregator=aggregator,
            collaborators=collaborators,
            config=effective_config,
            clock=clock,
        ),
        trending=TrendingRanker(effective_uow, default_limit=effective_config.trending_limit),
    )
    log.debug(
        "Ledger services ready: dedup_window=%s, monthly_window=%s",
        effective_config.dedup_window,
        effective_config.monthly_window,
    )
    return services


def create_user(
    *,
    display_name: str,
    user_type: UserType = UserType.LISTENER,
    created_at: datetime | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> User:
    """Register a catalog user the rollups can count."""

    effective_uow = _ensure_started(unit_of_work_factory)
    user = User(display_name=display_name, user_type=user_type)
    if created_at is not None:
        user.created_at = created_at
    with effective_uow() as uow:
        uow.repositories.users.add(user)
        uow.commit()
    log.info("Created %s user %s (%s)", user.user_type, user.id, display_name)
    return user


def register_track(
    *,
    title: str,
    artist_id: UUID,
    artist_name: str = "",
    is_public: bool = False,
    play_count: int = 0,
    created_at: datetime | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Track:
    """Register a catalog track; a non-zero seeded count joins the platform total."""

    effective_uow = _ensure_started(unit_of_work_factory)
    track = Track(
        title=title,
        artist_id=artist_id,
        artist_name=artist_name,
        is_public=is_public,
        play_count=play_count,
    )
    if created_at is not None:
        track.created_at = created_at
    with effective_uow() as uow:
        CounterService().register_track(uow.repositories, track)
        uow.commit()
    log.info("Registered track %s (%s) for artist %s", track.id, title, artist_id)
    return track
