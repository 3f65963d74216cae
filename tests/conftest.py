"""
Shared test configuration and fixtures.

Provides a temporary cache root and builders for sync response
documents shaped like real homeserver payloads.
"""

from __future__ import annotations

import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest

from sync_response_store import Credentials, StoreConfig

ROOM_A = "!a:example.org"
ROOM_B = "!b:example.org"
ALICE = "@alice:example.org"


def event(
    event_type: str,
    content: dict[str, Any] | None = None,
    event_id: str | None = None,
    state_key: str | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build a raw event dict."""
    data: dict[str, Any] = {"type": event_type, "content": content or {}}
    if event_id is not None:
        data["event_id"] = event_id
    if state_key is not None:
        data["state_key"] = state_key
    data.update(extra)
    return data


def message(event_id: str, body: str) -> dict[str, Any]:
    return event(
        "m.room.message",
        {"msgtype": "m.text", "body": body},
        event_id=event_id,
        sender=ALICE,
        origin_server_ts=1700000000000,
    )


def joined_room(
    state: list[dict[str, Any]] | None = None,
    timeline: list[dict[str, Any]] | None = None,
    account_data: list[dict[str, Any]] | None = None,
    limited: bool | None = None,
) -> dict[str, Any]:
    """Build a raw joined/left room section."""
    room: dict[str, Any] = {}
    if state is not None:
        room["state"] = {"events": state}
    if timeline is not None:
        room["timeline"] = {"events": timeline}
        if limited is not None:
            room["timeline"]["limited"] = limited
    if account_data is not None:
        room["account_data"] = {"events": account_data}
    return room


def invited_room(events: list[dict[str, Any]]) -> dict[str, Any]:
    return {"invite_state": {"events": events}}


def sync_document(
    next_batch: str = "s1",
    join: dict[str, Any] | None = None,
    invite: dict[str, Any] | None = None,
    leave: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a raw sync response document."""
    rooms: dict[str, Any] = {}
    if join:
        rooms["join"] = join
    if invite:
        rooms["invite"] = invite
    if leave:
        rooms["leave"] = leave
    document: dict[str, Any] = {"next_batch": next_batch}
    if rooms:
        document["rooms"] = rooms
    return document


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_dir: Path) -> StoreConfig:
    """Store configuration rooted in the temporary directory."""
    return StoreConfig(cache_dir=temp_dir)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(user_id=ALICE, device_id="DEVICE1")
