"""
Sync response store contract.

Consumed by the sync engine to resume from a cached payload instead of
performing a full initial sync. Implementations are caches: every
failure degrades to "nothing cached" so callers can always fall back to
a full resync.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .identity import Credentials
from .models import Event, RoomSummary, SyncResponse


class SyncResponseStore(ABC):
    """Abstract sync response cache."""

    @abstractmethod
    async def open(self, credentials: Credentials) -> bool:
        """Bind the store to an account.

        Returns:
            False if the credentials cannot identify a cache location
        """
        ...

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether :meth:`open` has succeeded."""
        ...

    @abstractmethod
    async def current_response(self) -> SyncResponse | None:
        """The cached sync response, or None if absent or unreadable."""
        ...

    @abstractmethod
    async def merge(self, response: SyncResponse | None) -> None:
        """Merge a newly received response into the cached one."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Remove the cached response."""
        ...

    @abstractmethod
    async def find_event(self, event_id: str, room_id: str) -> Event | None:
        """Find a cached event of a room by ID."""
        ...

    @abstractmethod
    async def room_summary(self, room_id: str) -> RoomSummary | None:
        """Summary of an invited room, derived from its invite state."""
        ...
