from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

from zoneinfo import ZoneInfo

import pytest

from playledger.config.stats import StatsConfig
from playledger.domain.model import PlayEvent, UserType
from playledger.domain.rollups import RollupAggregator, rank_top_tracks
from tests.helpers.ledger import (
    REFERENCE_NOW,
    FakeUnitOfWorkFactory,
    make_track,
    make_user,
)


@pytest.fixture
def aggregator(
    fake_uow: FakeUnitOfWorkFactory,
    utc_stats_config: StatsConfig,
) -> RollupAggregator:
    return RollupAggregator(fake_uow, config=utc_stats_config)


def _play(
    fake_uow: FakeUnitOfWorkFactory,
    track_id: UUID,
    listener_id: UUID | None = None,
    *,
    age: timedelta = timedelta(0),
) -> None:
    fake_uow.store.events.append(
        PlayEvent(track_id=track_id, listener_id=listener_id, occurred_at=REFERENCE_NOW - age)
    )


def test_artist_without_tracks_short_circuits(
    aggregator: RollupAggregator,
    fake_uow: FakeUnitOfWorkFactory,
) -> None:
    artist_id = uuid4()

    rollup = aggregator.artist_rollup(artist_id, REFERENCE_NOW)

    assert rollup.artist_id == artist_id
    assert rollup.total_plays == 0
    assert rollup.monthly_listeners == 0
    assert rollup.top_tracks == ()


def test_total_plays_is_sum_of_track_counters(
    aggregator: RollupAggregator,
    fake_uow: FakeUnitOfWorkFactory,
) -> None:
    artist_id = uuid4()
    for count in (3, 0, 12):
        fake_uow.store.add_track(make_track(artist_id=artist_id, play_count=count))
    fake_uow.store.add_track(make_track(play_count=99))

    rollup = aggregator.artist_rollup(artist_id, REFERENCE_NOW)

    assert rollup.total_plays == 15


def test_monthly_listeners_counts_distinct_identified_listeners(
    aggregator: RollupAggregator,
    fake_uow: FakeUnitOfWorkFactory,
) -> None:
    artist_id = uuid4()
    first = fake_uow.store.add_track(make_track(artist_id=artist_id))
    second = fake_uow.store.add_track(make_track(artist_id=artist_id))
    loyal, casual, lapsed = uuid4(), uuid4(), uuid4()
    _play(fake_uow, first.id, loyal, age=timedelta(days=2))
    _play(fake_uow, second.id, loyal, age=timedelta(days=5))
    _play(fake_uow, second.id, casual, age=timedelta(days=30))
    _play(fake_uow, first.id, lapsed, age=timedelta(days=30, seconds=1))
    _play(fake_uow, first.id, None, age=timedelta(hours=1))
    _play(fake_uow, make_track().id, uuid4(), age=timedelta(hours=1))

    rollup = aggregator.artist_rollup(artist_id, REFERENCE_NOW)

    assert rollup.monthly_listeners == 2


def test_top_tracks_order_by_count_then_newest(
    aggregator: RollupAggregator,
    fake_uow: FakeUnitOfWorkFactory,
) -> None:
    artist_id = uuid4()
    old_hit = make_track("old", artist_id=artist_id, play_count=5, created_at=REFERENCE_NOW)
    new_hit = make_track(
        "new",
        artist_id=artist_id,
        play_count=5,
        created_at=REFERENCE_NOW + timedelta(days=1),
    )
    top = make_track("top", artist_id=artist_id, play_count=9)
    quiet = make_track("quiet", artist_id=artist_id, play_count=1)
    for track in (quiet, old_hit, top, new_hit):
        fake_uow.store.add_track(track)

    rollup = aggregator.artist_rollup(artist_id, REFERENCE_NOW, top_n=3)

    assert [track.title for track in rollup.top_tracks] == ["top", "new", "old"]


def test_top_tracks_default_limit_is_five(
    aggregator: RollupAggregator,
    fake_uow: FakeUnitOfWorkFactory,
) -> None:
    artist_id = uuid4()
    for count in range(8):
        fake_uow.store.add_track(make_track(artist_id=artist_id, play_count=count))

    rollup = aggregator.artist_rollup(artist_id, REFERENCE_NOW)

    assert [track.play_count for track in rollup.top_tracks] == [7, 6, 5, 4, 3]


def test_rank_top_tracks_breaks_full_ties_by_id() -> None:
    created = datetime(2025, 1, 1, tzinfo=UTC)
    tracks = [make_track(play_count=2, created_at=created) for _ in range(4)]

    ranked = rank_top_tracks(tracks, 4)

    assert [track.id for track in ranked] == sorted(track.id for track in tracks)


def test_platform_rollup_counts_today_from_local_midnight(
    aggregator: RollupAggregator,
    fake_uow: FakeUnitOfWorkFactory,
) -> None:
    midnight = datetime(2025, 6, 15, tzinfo=UTC)
    fake_uow.store.add_user(make_user(created_at=midnight))
    fake_uow.store.add_user(
        make_user(user_type=UserType.ARTIST, created_at=midnight + timedelta(hours=3))
    )
    fake_uow.store.add_user(make_user(created_at=midnight - timedelta(seconds=1)))
    fake_uow.store.add_user(make_user(user_type=UserType.ADMIN, created_at=midnight))
    fake_uow.store.add_track(make_track(created_at=midnight + timedelta(hours=1), play_count=4))
    fake_uow.store.add_track(
        make_track(created_at=midnight - timedelta(days=1), play_count=6, is_public=False)
    )

    rollup = aggregator.platform_rollup(REFERENCE_NOW)

    assert rollup.total_plays == 10
    assert rollup.new_users_today == 3
    assert rollup.new_tracks_today == 1
    assert rollup.total_users == 4
    assert rollup.total_artists == 1
    assert rollup.total_listeners == 2
    assert rollup.total_tracks == 2
    assert rollup.pending_approval == 1


def test_platform_total_reads_running_total(
    aggregator: RollupAggregator,
    fake_uow: FakeUnitOfWorkFactory,
) -> None:
    fake_uow.store.platform_total = 42

    assert aggregator.platform_rollup(REFERENCE_NOW).total_plays == 42


def test_daily_plays_buckets_by_calendar_day(
    aggregator: RollupAggregator,
    fake_uow: FakeUnitOfWorkFactory,
) -> None:
    artist_id = uuid4()
    track = fake_uow.store.add_track(make_track(artist_id=artist_id))
    _play(fake_uow, track.id, uuid4(), age=timedelta(hours=1))
    _play(fake_uow, track.id, None, age=timedelta(hours=2))
    _play(fake_uow, track.id, uuid4(), age=timedelta(days=2))
    _play(fake_uow, track.id, uuid4(), age=timedelta(days=9))

    daily = aggregator.daily_plays(artist_id, REFERENCE_NOW, days=3)

    assert [(bucket.day, bucket.plays) for bucket in daily] == [
        (date(2025, 6, 13), 1),
        (date(2025, 6, 14), 0),
        (date(2025, 6, 15), 2),
    ]


@pytest.mark.parametrize(
    ("now_local", "expected_days"),
    [
        # spring forward: 2026-03-08 has 23 hours
        (datetime(2026, 3, 9, 0, 30), [date(2026, 3, 7), date(2026, 3, 8), date(2026, 3, 9)]),
        # fall back: 2026-11-01 has 25 hours
        (datetime(2026, 11, 2, 23, 30), [date(2026, 10, 31), date(2026, 11, 1), date(2026, 11, 2)]),
    ],
)
def test_daily_plays_steps_calendar_days_across_dst(
    fake_uow: FakeUnitOfWorkFactory,
    now_local: datetime,
    expected_days: list[date],
) -> None:
    new_york = ZoneInfo("America/New_York")
    aggregator = RollupAggregator(fake_uow, config=StatsConfig(timezone=new_york))
    artist_id = uuid4()
    track = fake_uow.store.add_track(make_track(artist_id=artist_id))
    middle = expected_days[1]
    played_at = datetime(middle.year, middle.month, middle.day, 12, tzinfo=new_york)
    fake_uow.store.events.append(
        PlayEvent(track_id=track.id, listener_id=uuid4(), occurred_at=played_at)
    )
    now = now_local.replace(tzinfo=new_york).astimezone(UTC)

    daily = aggregator.daily_plays(artist_id, now, days=3)

    assert [bucket.day for bucket in daily] == expected_days
    assert [bucket.plays for bucket in daily] == [0, 1, 0]


def test_daily_plays_for_artist_without_tracks_is_all_zero(
    aggregator: RollupAggregator,
) -> None:
    daily = aggregator.daily_plays(uuid4(), REFERENCE_NOW)

    assert len(daily) == 7
    assert {bucket.plays for bucket in daily} == {0}
    assert daily[-1].day == date(2025, 6, 15)


def test_daily_plays_requires_positive_span(aggregator: RollupAggregator) -> None:
    with pytest.raises(ValueError, match="days"):
        aggregator.daily_plays(uuid4(), REFERENCE_NOW, days=0)
