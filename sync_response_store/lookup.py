"""Event lookup within a cached sync response."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator

from .constants import Membership
from .models import Event, SyncResponse


def iter_room_events(response: SyncResponse, room_id: str) -> Iterator[Event]:
    """Yield every cached event of a room in lookup order.

    Categories are visited join, invite, leave. Joined and left rooms
    contribute state, timeline and account data events in that order;
    invited rooms contribute their invite state.
    """
    for category in Membership.SEARCH_ORDER:
        room = getattr(response.rooms, category).get(room_id)
        if room is not None:
            yield from room.all_events()


def find_event(response: SyncResponse, event_id: str, room_id: str) -> Event | None:
    """Find an event by ID within one room of a sync response.

    Sync payloads do not reliably embed the room ID in their events, so
    the returned event is a copy with ``room_id`` set to ``room_id``.

    Args:
        response: Cached sync response to search
        event_id: Event ID to look for
        room_id: Room the event belongs to

    Returns:
        The first matching event, or None
    """
    for event in iter_room_events(response, room_id):
        if event.event_id == event_id:
            return dataclasses.replace(event, room_id=room_id)
    return None
