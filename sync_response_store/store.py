"""
File-backed sync response store.

Caches the latest Matrix sync response of one account in a single JSON
file at ``<cache-root>/SyncResponse/<user_id>/syncResponse`` so a client
can resume from it after a restart.

Usage:

    >>> store = SyncResponseFileStore(StoreConfig.from_environment())
    >>> if await store.open(Credentials(user_id="@alice:example.org")):
    ...     await store.merge(response)
    ...     cached = await store.current_response()
    ...     await store.close()

The store is a pure optimization layer. Nothing it does raises to the
caller: unreadable or missing data reads as None and failed writes are
dropped, so the caller can always fall back to a full resync.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from types import TracebackType

from .accessor import SerializedFileAccessor
from .codec import decode_response, encode_document
from .config import StoreConfig
from .exceptions import DocumentDecodeError, IdentityError, SyncStoreError
from .identity import Credentials, IdentityProvider, validate_user_id
from .logging_utils import StoreLoggerAdapter, get_store_logger
from .lookup import find_event
from .merge import merge_documents
from .models import Event, RoomSummary, SyncResponse
from .protocol import SyncResponseStore
from .summary import summarize_invited_room

logger = get_store_logger("store")


class SyncResponseFileStore(SyncResponseStore):
    """Sync response cache persisted to a single file per account.

    States:
    - unopened: every operation is a no-op returning None
    - opened: operations go through a SerializedFileAccessor bound to the
      account's cache file

    Operations issued by one caller run in issue order, so a
    ``current_response()`` awaited after ``merge()`` sees the merge even
    though ``merge()`` does not wait for the file write. Concurrent
    ``merge()`` calls on one instance are serialized from their read to
    the submission of their write, so none is lost.
    """

    def __init__(self, config: StoreConfig | None = None):
        """Initialize an unopened store.

        Args:
            config: Store configuration. Defaults to StoreConfig()
        """
        self.config = config or StoreConfig()
        self.last_error: SyncStoreError | None = None
        self._accessor: SerializedFileAccessor | None = None
        self._user_id: str | None = None
        self._merge_lock = asyncio.Lock()
        self._log: StoreLoggerAdapter = StoreLoggerAdapter(logger, {})

    async def __aenter__(self) -> SyncResponseFileStore:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def open(self, credentials: Credentials | None) -> bool:
        """Bind the store to an account and prepare its cache directory.

        A store that is already open is closed and rebound. If the
        credentials are unusable the store is left as it was.

        Returns:
            True on success, False if the credentials lack a usable user ID
        """
        try:
            user_id = validate_user_id(credentials.user_id if credentials else None)
        except IdentityError as e:
            self.last_error = e
            logger.warning(f"Cannot open sync response store: {e.message}")
            return False

        if self._accessor is not None:
            await self.close()

        self._user_id = user_id
        self._accessor = SerializedFileAccessor(self.config.response_path(user_id))
        self._log = StoreLoggerAdapter(logger, {"user_id": user_id})
        await self._accessor.initialize()
        self._log.info(f"Opened sync response store at {self._accessor.path}")
        return True

    async def open_with_provider(self, provider: IdentityProvider) -> bool:
        """Open the store with credentials obtained from a provider.

        Returns:
            False if the provider has no credentials or they are unusable
        """
        try:
            credentials = await provider.get_credentials()
        except IdentityError as e:
            self.last_error = e
            logger.warning(f"Cannot open sync response store: {e.message}")
            return False
        return await self.open(credentials)

    async def flush(self) -> None:
        """Wait until every queued write has reached the disk."""
        if self._accessor is not None:
            await self._accessor.drain()

    async def close(self) -> None:
        """Flush pending writes and return to the unopened state."""
        if self._accessor is None:
            return
        await self._accessor.close()
        self._accessor = None
        self._user_id = None
        self._log = StoreLoggerAdapter(logger, {})

    @property
    def is_open(self) -> bool:
        return self._accessor is not None

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def path(self) -> Path | None:
        """Cache file path, or None while unopened."""
        return self._accessor.path if self._accessor else None

    @property
    def storage_error(self) -> SyncStoreError | None:
        """Most recent swallowed file I/O failure, for diagnostics."""
        return self._accessor.last_error if self._accessor else None

    # =========================================================================
    # Store contract
    # =========================================================================

    async def current_response(self) -> SyncResponse | None:
        """The cached sync response, or None if absent or unreadable."""
        if self._accessor is None:
            return None

        data = await self._accessor.read()
        if data is None:
            return None
        try:
            return decode_response(data)
        except DocumentDecodeError as e:
            self.last_error = e
            self._log.debug(f"Ignoring unreadable cached sync response: {e.message}")
            return None

    async def merge(self, response: SyncResponse | None) -> None:
        """Merge a newly received response into the cached one.

        The merged document is queued for writing; this does not wait for
        the write to complete.
        """
        if self._accessor is None or response is None:
            return

        async with self._merge_lock:
            current = await self.current_response()
            merged = merge_documents(
                current.to_dict() if current else None,
                response.to_dict(),
                self.config.list_merge,
            )
            self._accessor.write(encode_document(merged))
        self._log.debug(f"Queued merged sync response (next_batch={response.next_batch})")

    async def clear(self) -> None:
        """Remove the cached response."""
        if self._accessor is None:
            return
        # Ordered after any merge already in progress
        async with self._merge_lock:
            await self._accessor.delete()
        self._log.info("Cleared cached sync response")

    async def find_event(self, event_id: str, room_id: str) -> Event | None:
        """Find a cached event of a room by ID.

        The returned event has ``room_id`` set.
        """
        response = await self.current_response()
        if response is None:
            return None
        return find_event(response, event_id, room_id)

    async def room_summary(self, room_id: str) -> RoomSummary | None:
        """Summary of an invited room, derived from its invite state.

        Joined and left rooms yield None.
        """
        response = await self.current_response()
        if response is None:
            return None
        return summarize_invited_room(response, room_id)
