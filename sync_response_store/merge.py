"""
Merging of sync response documents.

A cached document and a newly received incremental payload are combined
as JSON trees. Objects merge key by key, recursively. Scalars and
mismatched kinds are replaced by the incoming value. Lists follow a
:class:`ListMergePolicy`:

- ``REPLACE``: every incoming list replaces the cached list.
- ``APPEND``: lists stored under an ``events`` key are concatenated with
  de-duplication, because incremental payloads only carry events newer
  than the previous cursor. Cached events keep their position, an
  incoming event with the same identity replaces its cached copy in
  place, and new events are appended in incoming order. If the object
  holding the list is marked ``"limited": true`` the server skipped
  events and the incoming list replaces the cached one. Every other list
  is replaced.

Event identity is the ``event_id`` when present. Events without one are
identified by ``(type, state_key)`` when they carry a state key. Beyond
that the key depends on the section holding the list: account data keeps
one event per ``type`` and presence one per ``(type, sender)``. Any other
event without an ID (receipts, typing, to-device messages) has no
identity and is always appended.

The functions here are pure: inputs are never mutated and the result
shares no mutable containers with them.
"""

from __future__ import annotations

import copy
from enum import Enum
from typing import Any, TypeAlias

JsonValue: TypeAlias = dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None

EVENTS_KEY = "events"
LIMITED_KEY = "limited"
ACCOUNT_DATA_SECTION = "account_data"
PRESENCE_SECTION = "presence"


class ListMergePolicy(Enum):
    """How lists present in both documents are combined."""

    REPLACE = "replace"
    APPEND = "append"


def event_identity(event: JsonValue, section: str | None = None) -> tuple[str, ...] | None:
    """Return the de-duplication key of an event, or None if it has none.

    Args:
        event: Raw event object
        section: Key of the object holding the event list, e.g. ``account_data``
    """
    if not isinstance(event, dict):
        return None
    event_id = event.get("event_id")
    if isinstance(event_id, str):
        return ("event_id", event_id)
    event_type = event.get("type")
    if not isinstance(event_type, str):
        return None
    state_key = event.get("state_key")
    if isinstance(state_key, str):
        return ("state", event_type, state_key)
    if section == ACCOUNT_DATA_SECTION:
        return ("type", event_type)
    sender = event.get("sender")
    if section == PRESENCE_SECTION and isinstance(sender, str):
        return ("sender", event_type, sender)
    return None


def merge_event_lists(
    current: list[JsonValue],
    incoming: list[JsonValue],
    section: str | None = None,
) -> list[JsonValue]:
    """Concatenate two event lists, de-duplicating by event identity."""
    merged = copy.deepcopy(current)
    positions: dict[tuple[str, ...], int] = {}
    for index, event in enumerate(merged):
        identity = event_identity(event, section)
        if identity is not None:
            positions.setdefault(identity, index)

    for event in incoming:
        identity = event_identity(event, section)
        if identity is not None and identity in positions:
            merged[positions[identity]] = copy.deepcopy(event)
            continue
        if identity is not None:
            positions[identity] = len(merged)
        merged.append(copy.deepcopy(event))
    return merged


def _merge_into(
    target: dict[str, JsonValue],
    incoming: dict[str, JsonValue],
    list_policy: ListMergePolicy,
    section: str | None = None,
) -> None:
    """Merge ``incoming`` into ``target`` in place. ``target`` must be a private copy.

    ``section`` is the key under which ``target`` sits in its parent.
    """
    gap = incoming.get(LIMITED_KEY) is True

    for key, value in incoming.items():
        if key not in target:
            target[key] = copy.deepcopy(value)
            continue

        existing = target[key]
        if isinstance(existing, dict) and isinstance(value, dict):
            _merge_into(existing, value, list_policy, key)
        elif (
            list_policy is ListMergePolicy.APPEND
            and key == EVENTS_KEY
            and not gap
            and isinstance(existing, list)
            and isinstance(value, list)
        ):
            target[key] = merge_event_lists(existing, value, section)
        else:
            target[key] = copy.deepcopy(value)


def merge_documents(
    current: dict[str, JsonValue] | None,
    incoming: dict[str, JsonValue],
    list_policy: ListMergePolicy = ListMergePolicy.APPEND,
) -> dict[str, JsonValue]:
    """Merge an incoming sync response document into the cached one.

    Args:
        current: Cached document, or None if nothing is cached yet
        incoming: Newly received document
        list_policy: Rule for lists present on both sides

    Returns:
        A new merged document
    """
    if current is None:
        return copy.deepcopy(incoming)
    merged = copy.deepcopy(current)
    _merge_into(merged, incoming, list_policy)
    return merged
