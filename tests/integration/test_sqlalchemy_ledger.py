"""End-to-end ledger behaviour against a migrated SQLite database."""

from __future__ import annotations

import threading
from datetime import UTC, timedelta
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
from sqlalchemy import insert

from playledger.adapters.sqlalchemy.mappings import dedup_claim_table
from playledger.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    build_engine,
    shutdown,
    startup,
)
from playledger.app import LedgerServices, build_services, create_user, register_track
from playledger.config.stats import StatsConfig
from playledger.domain.errors import NotFoundError
from playledger.domain.locking import KeyedLocks
from playledger.domain.model import UserType

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from tests.helpers.ledger import FrozenClock

pytestmark = pytest.mark.integration


@pytest.fixture
def services(
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    clock: FrozenClock,
) -> LedgerServices:
    return build_services(
        unit_of_work_factory=sqlite_unit_of_work,
        config=StatsConfig(timezone=UTC),
        clock=clock,
    )


def test_identified_play_counts_once_per_window(
    services: LedgerServices,
    clock: FrozenClock,
) -> None:
    uow = services.unit_of_work_factory
    track = register_track(title="Song", artist_id=uuid4(), unit_of_work_factory=uow)
    listener_id = uuid4()

    first = services.ingestion.record_play(track.id, listener_id)
    repeat = services.ingestion.record_play(track.id, listener_id)
    clock.advance(timedelta(hours=24))
    boundary = services.ingestion.record_play(track.id, listener_id)
    clock.advance(timedelta(seconds=1))
    later = services.ingestion.record_play(track.id, listener_id)

    assert (first.counted, first.new_total) == (True, 1)
    assert (repeat.counted, repeat.new_total) == (False, 1)
    assert boundary.counted is False
    assert (later.counted, later.new_total) == (True, 2)
    assert services.stats.listener_total_plays(listener_id) == 2


def test_anonymous_plays_never_dedupe(services: LedgerServices) -> None:
    uow = services.unit_of_work_factory
    track = register_track(title="Song", artist_id=uuid4(), unit_of_work_factory=uow)

    totals = [services.ingestion.record_play(track.id).new_total for _ in range(4)]

    assert totals == [1, 2, 3, 4]


def test_unknown_track_is_not_found(services: LedgerServices) -> None:
    with pytest.raises(NotFoundError):
        services.ingestion.record_play(uuid4(), uuid4())


def test_claim_committed_by_another_process_blocks_the_play(
    services: LedgerServices,
    sqlite_unit_of_work: Callable[[], SqlAlchemyUnitOfWork],
    clock: FrozenClock,
) -> None:
    uow = sqlite_unit_of_work
    track = register_track(
        title="Song",
        artist_id=uuid4(),
        play_count=3,
        unit_of_work_factory=uow,
    )
    listener_id = uuid4()
    with uow() as unit:
        unit.session.execute(
            insert(dedup_claim_table).values(
                listener_id=listener_id,
                track_id=track.id,
                claimed_at=clock.now,
            )
        )
        unit.commit()

    result = services.ingestion.record_play(track.id, listener_id)

    assert result.counted is False
    assert result.new_total == 3


def test_rollups_stay_consistent_with_counters(
    services: LedgerServices,
    clock: FrozenClock,
) -> None:
    uow = services.unit_of_work_factory
    artist = create_user(
        display_name="Artist",
        user_type=UserType.ARTIST,
        unit_of_work_factory=uow,
    )
    create_user(display_name="Fan", created_at=clock.now, unit_of_work_factory=uow)
    hit = register_track(
        title="Hit",
        artist_id=artist.id,
        is_public=True,
        play_count=10,
        created_at=clock.now,
        unit_of_work_factory=uow,
    )
    b_side = register_track(
        title="B-side",
        artist_id=artist.id,
        created_at=clock.now - timedelta(days=2),
        unit_of_work_factory=uow,
    )
    listeners = [uuid4() for _ in range(3)]

    for listener_id in listeners:
        services.ingestion.record_play(hit.id, listener_id)
    services.ingestion.record_play(b_side.id, listeners[0])
    services.ingestion.record_play(b_side.id)

    rollup = services.stats.artist_rollup(artist.id)
    platform = services.stats.platform_rollup()

    assert rollup.total_plays == 15
    assert rollup.monthly_listeners == 3
    assert [track.title for track in rollup.top_tracks] == ["Hit", "B-side"]
    assert platform.total_plays == 15
    assert platform.total_tracks == 2
    assert platform.pending_approval == 1
    assert platform.total_artists == 1
    assert platform.new_tracks_today == 1
    assert services.reconcile_platform_total() == 15

    clock.advance(timedelta(days=31))
    assert services.stats.artist_rollup(artist.id).monthly_listeners == 0


def test_trending_reads_public_tracks_from_store(services: LedgerServices) -> None:
    uow = services.unit_of_work_factory
    for title, plays in (("low", 1), ("high", 9), ("mid", 5)):
        register_track(
            title=title,
            artist_id=uuid4(),
            is_public=True,
            play_count=plays,
            unit_of_work_factory=uow,
        )
    register_track(title="pending", artist_id=uuid4(), play_count=50, unit_of_work_factory=uow)

    feed = services.trending.trending(limit=2)

    assert [track.title for track in feed] == ["high", "mid"]
    assert [track.title for track in feed] == ["high", "mid"]


def test_reconcile_repairs_drifted_total(services: LedgerServices) -> None:
    uow = services.unit_of_work_factory
    register_track(title="Song", artist_id=uuid4(), play_count=4, unit_of_work_factory=uow)
    with uow() as unit:
        unit.repositories.counters.set_platform_total(99)
        unit.commit()

    assert services.reconcile_platform_total() == 4
    assert services.stats.platform_rollup().total_plays == 4


@pytest.fixture
def file_services(tmp_path: Path, clock: FrozenClock) -> Iterator[LedgerServices]:
    engine = build_engine(f"sqlite+pysqlite:///{tmp_path / 'ledger.db'}")
    startup(engine=engine, force=True)
    try:
        yield build_services(
            unit_of_work_factory=SqlAlchemyUnitOfWork,
            config=StatsConfig(timezone=UTC),
            clock=clock,
        )
    finally:
        shutdown()


def test_concurrent_reports_for_one_pair_count_once(
    file_services: LedgerServices,
    clock: FrozenClock,
) -> None:
    uow = file_services.unit_of_work_factory
    track = register_track(title="Song", artist_id=uuid4(), unit_of_work_factory=uow)
    listener_id = uuid4()
    barrier = threading.Barrier(8)
    outcomes: list[bool] = []
    errors: list[Exception] = []
    guard = threading.Lock()

    def report() -> None:
        # separate lock registries stand in for separate processes
        ingestion = build_services(
            unit_of_work_factory=SqlAlchemyUnitOfWork,
            config=StatsConfig(timezone=UTC),
            clock=clock,
            locks=KeyedLocks(),
        ).ingestion
        barrier.wait()
        try:
            result = ingestion.record_play(track.id, listener_id)
        except Exception as exc:  # noqa: BLE001
            with guard:
                errors.append(exc)
            return
        with guard:
            outcomes.append(result.counted)

    threads = [threading.Thread(target=report) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert sorted(outcomes) == [False] * 7 + [True]
    assert file_services.stats.listener_total_plays(listener_id) == 1
    assert file_services.stats.platform_rollup().total_plays == 1


def test_concurrent_plays_on_memory_store_keep_platform_total(services: LedgerServices) -> None:
    uow = services.unit_of_work_factory
    track = register_track(title="Song", artist_id=uuid4(), unit_of_work_factory=uow)
    workers, rounds = 16, 5
    barrier = threading.Barrier(workers)
    errors: list[Exception] = []
    guard = threading.Lock()

    def report() -> None:
        barrier.wait()
        for _ in range(rounds):
            try:
                services.ingestion.record_play(track.id, uuid4())
            except Exception as exc:  # noqa: BLE001
                with guard:
                    errors.append(exc)

    threads = [threading.Thread(target=report) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    with uow() as unit:
        stored = unit.repositories.tracks.get(track.id)
        assert stored is not None
        assert stored.play_count == workers * rounds
    assert services.stats.platform_rollup().total_plays == workers * rounds
    assert services.reconcile_platform_total() == workers * rounds
    assert services.stats.platform_rollup().total_plays == workers * rounds
