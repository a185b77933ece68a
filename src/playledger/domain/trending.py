"""Trending ranker for the discovery feed."""

from __future__ import annotations

from typing import TYPE_CHECKING

from playledger.config.stats import DEFAULT_TRENDING_LIMIT

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from playledger.domain.model import Track
    from playledger.domain.ports import LedgerUnitOfWork

DEFAULT_PAGE_SIZE = 50


class TrendingFeed:
    """Lazy, finite view of the ranking.

    Nothing is read until iteration starts; each iteration re-queries the store, so the
    feed can be walked more than once.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], LedgerUnitOfWork],
        *,
        limit: int,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if limit < 0:
            raise ValueError("limit must be non-negative")
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._unit_of_work_factory = unit_of_work_factory
        self.limit = limit
        self.page_size = page_size

    def __iter__(self) -> Iterator[Track]:
        offset = 0
        while offset < self.limit:
            size = min(self.page_size, self.limit - offset)
            with self._unit_of_work_factory() as uow:
                page = list(uow.repositories.tracks.ranked(limit=size, offset=offset))
            yield from page
            if len(page) < size:
                return
            offset += size


class TrendingRanker:
    """Public tracks by ``play_count`` descending, ties broken by track id ascending."""

    def __init__(
        self,
        unit_of_work_factory: Callable[[], LedgerUnitOfWork],
        *,
        default_limit: int = DEFAULT_TRENDING_LIMIT,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._unit_of_work_factory = unit_of_work_factory
        self.default_limit = default_limit
        self.page_size = page_size

    def trending(self, limit: int | None = None) -> TrendingFeed:
        return TrendingFeed(
            self._unit_of_work_factory,
            limit=self.default_limit if limit is None else limit,
            page_size=self.page_size,
        )
