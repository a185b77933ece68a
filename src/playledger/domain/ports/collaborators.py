"""Read-only port to collaborators outside the ledger (social graph, notifications)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from uuid import UUID


@runtime_checkable
class DashboardCollaborators(Protocol):
    def followers_count(self, artist_id: UUID) -> int: ...

    def following_count(self, artist_id: UUID) -> int: ...

    def unread_notifications(self, user_id: UUID) -> int: ...

    def pending_verifications(self) -> int: ...


class NullCollaborators:
    """Stand-in used until the social graph and notification services are wired."""

    def followers_count(self, artist_id: UUID) -> int:
        _ = artist_id
        return 0

    def following_count(self, artist_id: UUID) -> int:
        _ = artist_id
        return 0

    def unread_notifications(self, user_id: UUID) -> int:
        _ = user_id
        return 0

    def pending_verifications(self) -> int:
        return 0
