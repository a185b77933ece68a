"""Domain port definitions for adapters."""

from __future__ import annotations

from .collaborators import DashboardCollaborators, NullCollaborators
from .persistence import (
    DedupClaimRepository,
    PlayCounterRepository,
    PlayEventRepository,
    Repository,
    TrackRepository,
    UserRepository,
)
from .unit_of_work import LedgerRepositories, LedgerUnitOfWork

__all__ = [
    "DashboardCollaborators",
    "DedupClaimRepository",
    "LedgerRepositories",
    "LedgerUnitOfWork",
    "NullCollaborators",
    "PlayCounterRepository",
    "PlayEventRepository",
    "Repository",
    "TrackRepository",
    "UserRepository",
]
