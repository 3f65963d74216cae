"""
Display-name derivation for invited rooms.

Only the stripped invite state of a room is available before joining, so
the name is derived from three state event types, processed in order:

- ``m.room.name`` always sets the name, even over a previous one, so the
  last room name event wins wherever it appears.
- ``m.room.canonical_alias`` sets the name only while none is set, using
  ``alias`` or else the first of ``alt_aliases``.
- ``m.room.aliases`` sets the name only while none is set, using the
  first of ``aliases``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .constants import EventTypes
from .models import Event, RoomSummary, SyncResponse


def _string(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _first_string(value: Any) -> str | None:
    """First element of a non-empty list of strings, else None."""
    if isinstance(value, list) and value and all(isinstance(item, str) for item in value):
        return value[0]
    return None


def derive_display_name(events: Iterable[Event]) -> str | None:
    """Derive a room display name from invite-state events.

    Args:
        events: Invite-state events in payload order

    Returns:
        The derived name, or None if no event provides one
    """
    name: str | None = None
    for event in events:
        if event.type == EventTypes.Name:
            # Overwrites unconditionally, including with a missing name
            name = _string(event.content.get("name"))
        elif event.type == EventTypes.CanonicalAlias:
            if name is None:
                name = _string(event.content.get("alias"))
                if name is None:
                    name = _first_string(event.content.get("alt_aliases"))
        elif event.type == EventTypes.Aliases:
            if name is None:
                name = _first_string(event.content.get("aliases"))
    return name


def summarize_invited_room(response: SyncResponse, room_id: str) -> RoomSummary | None:
    """Summarize a room the user is invited to.

    Joined and left rooms are not summarized.

    Returns:
        A summary, or None if the room is not an invite or has no derivable name
    """
    room = response.rooms.invite.get(room_id)
    if room is None or room.invite_state is None:
        return None
    display_name = derive_display_name(room.invite_state)
    if display_name is None:
        return None
    return RoomSummary(room_id=room_id, display_name=display_name)
