"""
Sync Response Store

Local cache of a Matrix client's incremental sync response, letting a
restarted client resume its session state without a full initial sync.

Provides:
- A file-backed store with serialized, ordered disk access
- Recursive merging of incremental payloads into the cached response
- Event lookup across membership categories
- Display-name derivation for invited rooms

Usage:

    >>> from sync_response_store import Credentials, StoreConfig, SyncResponseFileStore
    >>> async with SyncResponseFileStore(StoreConfig.from_environment()) as store:
    ...     if await store.open(Credentials(user_id="@alice:example.org")):
    ...         await store.merge(response)
    ...         event = await store.find_event("$event:example.org", "!room:example.org")
"""

from .accessor import SerializedFileAccessor
from .codec import decode_response, encode_response
from .config import StoreConfig
from .constants import EventTypes, Membership
from .exceptions import DocumentDecodeError, IdentityError, StorageIOError, SyncStoreError
from .identity import (
    ConfigFileIdentityProvider,
    Credentials,
    IdentityProvider,
    StaticIdentityProvider,
)
from .logging_utils import StructuredJsonFormatter
from .lookup import find_event
from .merge import ListMergePolicy, merge_documents
from .models import (
    Event,
    InvitedRoomSync,
    JoinedRoomSync,
    Rooms,
    RoomSummary,
    SyncResponse,
)
from .protocol import SyncResponseStore
from .store import SyncResponseFileStore
from .summary import derive_display_name, summarize_invited_room

__version__ = "0.1.0"

__all__ = [
    # Store
    "SyncResponseStore",
    "SyncResponseFileStore",
    "SerializedFileAccessor",
    # Configuration and identity
    "StoreConfig",
    "Credentials",
    "IdentityProvider",
    "StaticIdentityProvider",
    "ConfigFileIdentityProvider",
    # Models
    "SyncResponse",
    "Rooms",
    "JoinedRoomSync",
    "InvitedRoomSync",
    "Event",
    "RoomSummary",
    "EventTypes",
    "Membership",
    # Pure logic
    "ListMergePolicy",
    "merge_documents",
    "find_event",
    "derive_display_name",
    "summarize_invited_room",
    "encode_response",
    "decode_response",
    # Exceptions
    "SyncStoreError",
    "StorageIOError",
    "DocumentDecodeError",
    "IdentityError",
    # Logging
    "StructuredJsonFormatter",
]
