"""SQLAlchemy adapter package for the play ledger."""

from __future__ import annotations

from .mappings import PLATFORM_TOTAL_PLAYS, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyDedupClaimRepository,
    SqlAlchemyPlayCounterRepository,
    SqlAlchemyPlayEventRepository,
    SqlAlchemyTrackRepository,
    SqlAlchemyUserRepository,
)
from .unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    build_engine,
    shutdown,
    startup,
)

__all__ = [
    "PLATFORM_TOTAL_PLAYS",
    "SqlAlchemyDedupClaimRepository",
    "SqlAlchemyPlayCounterRepository",
    "SqlAlchemyPlayEventRepository",
    "SqlAlchemyTrackRepository",
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyUserRepository",
    "StartupError",
    "build_engine",
    "mapper_registry",
    "shutdown",
    "startup",
]
