"""
Sync response data model.

Dataclasses for the parts of a Matrix ``/sync`` response the cache
inspects: the continuation token, the three membership categories of the
``rooms`` section and the event lists inside each room. Everything else
is kept verbatim in ``extra`` dicts so that decoding and re-encoding a
cached document does not drop sections this library does not model.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .constants import Membership

_EVENT_FIELDS = (
    "event_id",
    "type",
    "content",
    "room_id",
    "state_key",
    "sender",
    "origin_server_ts",
    "unsigned",
)

_JOINED_ROOM_SECTIONS = ("state", "timeline", "account_data")
_TIMELINE_FIELDS = ("limited", "prev_batch")


def _object(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"{where} must be an object, got {type(value).__name__}")
    return value


def _events_from(section: Any, where: str) -> list[Event] | None:
    """Decode the ``events`` list of a section object, if present."""
    if section is None:
        return None
    events = _object(section, where).get("events")
    if events is None:
        return None
    if not isinstance(events, list):
        raise TypeError(f"{where}.events must be a list")
    return [Event.from_dict(_object(item, f"{where}.events[]")) for item in events]


def _events_to(events: list[Event]) -> list[dict[str, Any]]:
    return [event.to_dict() for event in events]


def _section_extra(section: dict[str, Any], modelled: tuple[str, ...] = ()) -> dict[str, Any]:
    """Keys of a section object other than its events and modelled fields."""
    return {k: v for k, v in section.items() if k != "events" and k not in modelled}


def _section_to(events: list[Event] | None, extra: dict[str, Any] | None) -> dict[str, Any] | None:
    """Rebuild a section object, or None if it was absent."""
    if events is None and extra is None:
        return None
    section = dict(extra or {})
    if events is not None:
        section["events"] = _events_to(events)
    return section


@dataclass
class Event:
    """A Matrix event as found in a sync response.

    Only ``type`` and ``content`` are guaranteed. Stripped invite-state
    and account-data events carry no ``event_id``, and events inside a
    room section usually omit ``room_id``.

    Attributes:
        type: Event type, e.g. ``m.room.name``
        content: Free-form event content
        event_id: Event identifier, absent for some categories
        room_id: Room identifier, rarely embedded in sync payloads
        state_key: State key for state events
        sender: Sender user ID
        origin_server_ts: Origin timestamp in milliseconds
        unsigned: Unsigned data attached by the server
        extra: Any other top-level keys, preserved on re-encoding
    """

    type: str | None
    content: dict[str, Any] = field(default_factory=dict)
    event_id: str | None = None
    room_id: str | None = None
    state_key: str | None = None
    sender: str | None = None
    origin_server_ts: int | None = None
    unsigned: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary, omitting absent optional fields."""
        data: dict[str, Any] = dict(self.extra)
        if self.type is not None:
            data["type"] = self.type
        data["content"] = self.content
        for name in ("event_id", "room_id", "state_key", "sender", "origin_server_ts", "unsigned"):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Event:
        """Deserialize from dictionary."""
        content = data.get("content")
        return cls(
            type=data.get("type"),
            content=_object(content, "event.content") if content is not None else {},
            event_id=data.get("event_id"),
            room_id=data.get("room_id"),
            state_key=data.get("state_key"),
            sender=data.get("sender"),
            origin_server_ts=data.get("origin_server_ts"),
            unsigned=data.get("unsigned"),
            extra={k: v for k, v in data.items() if k not in _EVENT_FIELDS},
        )


@dataclass
class JoinedRoomSync:
    """Per-room section for joined and left rooms.

    The three event lists are searched in declaration order by event
    lookup. ``None`` means the section was absent from the payload.
    ``section_extra`` keeps any other keys found inside each section
    object so re-encoding does not drop them.
    """

    state: list[Event] | None = None
    timeline: list[Event] | None = None
    account_data: list[Event] | None = None
    timeline_limited: bool | None = None
    prev_batch: str | None = None
    section_extra: dict[str, dict[str, Any]] = field(default_factory=dict, compare=False)
    extra: dict[str, Any] = field(default_factory=dict)

    def all_events(self) -> list[Event]:
        """State, then timeline, then account data events."""
        events: list[Event] = []
        for section in (self.state, self.timeline, self.account_data):
            if section:
                events.extend(section)
        return events

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = dict(self.extra)
        for name in _JOINED_ROOM_SECTIONS:
            section = _section_to(getattr(self, name), self.section_extra.get(name))
            if name == "timeline" and (
                self.timeline_limited is not None or self.prev_batch is not None
            ):
                section = section if section is not None else {}
                if self.timeline_limited is not None:
                    section["limited"] = self.timeline_limited
                if self.prev_batch is not None:
                    section["prev_batch"] = self.prev_batch
            if section is not None:
                data[name] = section
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JoinedRoomSync:
        """Deserialize from dictionary."""
        timeline = data.get("timeline")
        timeline = _object(timeline, "timeline") if timeline is not None else {}
        return cls(
            state=_events_from(data.get("state"), "state"),
            timeline=_events_from(timeline or None, "timeline"),
            account_data=_events_from(data.get("account_data"), "account_data"),
            timeline_limited=timeline.get("limited"),
            prev_batch=timeline.get("prev_batch"),
            section_extra={
                name: _section_extra(data[name], _TIMELINE_FIELDS if name == "timeline" else ())
                for name in _JOINED_ROOM_SECTIONS
                if data.get(name) is not None
            },
            extra={k: v for k, v in data.items() if k not in _JOINED_ROOM_SECTIONS},
        )


@dataclass
class InvitedRoomSync:
    """Per-room section for invited rooms: stripped invite-state only."""

    invite_state: list[Event] | None = None
    section_extra: dict[str, dict[str, Any]] = field(default_factory=dict, compare=False)
    extra: dict[str, Any] = field(default_factory=dict)

    def all_events(self) -> list[Event]:
        return list(self.invite_state or [])

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = dict(self.extra)
        section = _section_to(self.invite_state, self.section_extra.get("invite_state"))
        if section is not None:
            data["invite_state"] = section
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InvitedRoomSync:
        """Deserialize from dictionary."""
        invite_state = data.get("invite_state")
        return cls(
            invite_state=_events_from(invite_state, "invite_state"),
            section_extra=(
                {"invite_state": _section_extra(invite_state)} if invite_state is not None else {}
            ),
            extra={k: v for k, v in data.items() if k != "invite_state"},
        )


@dataclass
class Rooms:
    """The ``rooms`` section, keyed by membership category then room ID."""

    join: dict[str, JoinedRoomSync] = field(default_factory=dict)
    invite: dict[str, InvitedRoomSync] = field(default_factory=dict)
    leave: dict[str, JoinedRoomSync] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary, omitting empty categories."""
        data: dict[str, Any] = dict(self.extra)
        for category in Membership.SEARCH_ORDER:
            rooms = getattr(self, category)
            if rooms:
                data[category] = {room_id: room.to_dict() for room_id, room in rooms.items()}
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Rooms:
        """Deserialize from dictionary."""
        join, invite, leave = (
            _object(data[category], f"rooms.{category}") if data.get(category) is not None else {}
            for category in Membership.SEARCH_ORDER
        )
        return cls(
            join={
                room_id: JoinedRoomSync.from_dict(_object(room, f"rooms.join.{room_id}"))
                for room_id, room in join.items()
            },
            invite={
                room_id: InvitedRoomSync.from_dict(_object(room, f"rooms.invite.{room_id}"))
                for room_id, room in invite.items()
            },
            leave={
                room_id: JoinedRoomSync.from_dict(_object(room, f"rooms.leave.{room_id}"))
                for room_id, room in leave.items()
            },
            extra={k: v for k, v in data.items() if k not in Membership.SEARCH_ORDER},
        )


@dataclass
class SyncResponse:
    """Root of a cached sync response.

    Attributes:
        next_batch: Continuation token for the next incremental sync
        rooms: Per-membership room sections
        extra: Other top-level sections (account_data, to_device, presence, ...)
    """

    next_batch: str | None = None
    rooms: Rooms = field(default_factory=Rooms)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = dict(self.extra)
        if self.next_batch is not None:
            data["next_batch"] = self.next_batch
        rooms = self.rooms.to_dict()
        if rooms:
            data["rooms"] = rooms
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SyncResponse:
        """Deserialize from dictionary."""
        rooms = data.get("rooms")
        return cls(
            next_batch=data.get("next_batch"),
            rooms=Rooms.from_dict(_object(rooms, "rooms")) if rooms is not None else Rooms(),
            extra={k: v for k, v in data.items() if k not in ("next_batch", "rooms")},
        )


@dataclass
class RoomSummary:
    """Display information derived for a room from cached state."""

    room_id: str
    display_name: str
    membership: str = Membership.INVITE

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "room_id": self.room_id,
            "display_name": self.display_name,
            "membership": self.membership,
        }
