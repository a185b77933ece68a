from __future__ import annotations

from uuid import UUID

import pytest

from playledger.domain.trending import TrendingFeed, TrendingRanker
from tests.helpers.ledger import FakeUnitOfWorkFactory, make_track


def _seed(fake_uow: FakeUnitOfWorkFactory, counts: list[int], *, public: bool = True) -> None:
    for count in counts:
        fake_uow.store.add_track(make_track(play_count=count, is_public=public))


def test_trending_orders_by_play_count_descending(fake_uow: FakeUnitOfWorkFactory) -> None:
    _seed(fake_uow, [3, 40, 7, 12])

    feed = TrendingRanker(fake_uow).trending(limit=3)

    assert [track.play_count for track in feed] == [40, 12, 7]


def test_trending_breaks_ties_by_id(fake_uow: FakeUnitOfWorkFactory) -> None:
    ids = [UUID(int=value) for value in (9, 2, 5)]
    for track_id in ids:
        fake_uow.store.add_track(make_track(play_count=4, track_id=track_id))

    feed = TrendingRanker(fake_uow).trending(limit=10)

    assert [track.id for track in feed] == sorted(ids)


def test_trending_skips_tracks_that_are_not_public(fake_uow: FakeUnitOfWorkFactory) -> None:
    _seed(fake_uow, [100], public=False)
    _seed(fake_uow, [1])

    feed = list(TrendingRanker(fake_uow).trending())

    assert [track.play_count for track in feed] == [1]


def test_trending_defaults_to_configured_limit(fake_uow: FakeUnitOfWorkFactory) -> None:
    _seed(fake_uow, list(range(15)))

    assert len(list(TrendingRanker(fake_uow).trending())) == 10
    assert len(list(TrendingRanker(fake_uow, default_limit=4).trending())) == 4


def test_feed_is_lazy_and_restartable(fake_uow: FakeUnitOfWorkFactory) -> None:
    _seed(fake_uow, [5, 4])

    feed = TrendingRanker(fake_uow).trending(limit=5)
    assert fake_uow.created == []

    first = [track.id for track in feed]
    second = [track.id for track in feed]

    assert first == second
    assert len(first) == 2


def test_feed_pages_through_the_store(fake_uow: FakeUnitOfWorkFactory) -> None:
    _seed(fake_uow, list(range(7)))

    feed = TrendingFeed(fake_uow, limit=6, page_size=2)

    assert [track.play_count for track in feed] == [6, 5, 4, 3, 2, 1]
    assert len(fake_uow.created) == 3


def test_feed_stops_at_a_short_page(fake_uow: FakeUnitOfWorkFactory) -> None:
    _seed(fake_uow, [1, 2, 3])

    feed = TrendingFeed(fake_uow, limit=10, page_size=2)

    assert len(list(feed)) == 3
    assert len(fake_uow.created) == 2


def test_zero_limit_yields_nothing(fake_uow: FakeUnitOfWorkFactory) -> None:
    _seed(fake_uow, [1])

    assert list(TrendingRanker(fake_uow).trending(limit=0)) == []


@pytest.mark.parametrize(("limit", "page_size"), [(-1, 10), (5, 0)])
def test_feed_rejects_invalid_bounds(
    fake_uow: FakeUnitOfWorkFactory,
    limit: int,
    page_size: int,
) -> None:
    with pytest.raises(ValueError):
        TrendingFeed(fake_uow, limit=limit, page_size=page_size)
