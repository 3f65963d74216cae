"""
Matrix names the sync response cache inspects or writes.

Only the event types and content keys that event lookup and room
display-name derivation need are listed here.
"""

from typing import Final


class EventTypes:
    """State event types used for invite-room display names."""

    Name: Final = "m.room.name"
    CanonicalAlias: Final = "m.room.canonical_alias"
    Aliases: Final = "m.room.aliases"


class Membership:
    """Membership categories of the ``rooms`` section of a sync response."""

    JOIN: Final = "join"
    INVITE: Final = "invite"
    LEAVE: Final = "leave"

    # Lookup order is significant
    SEARCH_ORDER: Final = (JOIN, INVITE, LEAVE)


# On-disk layout: <cache-root>/SyncResponse/<user_id>/syncResponse
FOLDER_NAME: Final = "SyncResponse"
FILE_NAME: Final = "syncResponse"
FILE_ENCODING: Final = "utf-8"
