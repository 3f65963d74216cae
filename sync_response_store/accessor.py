"""
Serialized access to a single cache file.

Every operation on the file goes through one asyncio queue drained by a
single worker task, so operations never overlap and run in the order
they were submitted. A read submitted after a write therefore observes
that write even though the write itself was not awaited.

Failures never propagate: reads degrade to None, writes and deletes to
no-ops. The most recent failure is kept in ``last_error``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .constants import FILE_ENCODING
from .exceptions import StorageIOError
from .file_ops import ensure_directory, read_bytes, remove_file, write_bytes_atomic

logger = logging.getLogger(__name__)


@dataclass
class _Operation:
    """A unit of work queued for the worker."""

    name: str
    run: Callable[[], Awaitable[Any]]
    future: asyncio.Future[Any] | None = None


class SerializedFileAccessor:
    """Owns one file path and funnels all access through a FIFO worker.

    Must be used from within a running event loop. The worker task is
    started on first use and stopped by :meth:`close`.

    Contract:
    - ``initialize``, ``read`` and ``delete`` wait for their operation
    - ``write`` only enqueues and returns immediately
    - operations run one at a time, in submission order
    - a submitted operation always runs to completion
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.last_error: StorageIOError | None = None
        self._queue: asyncio.Queue[_Operation] = asyncio.Queue()
        self._worker: asyncio.Task[None] | None = None

    # =========================================================================
    # Public operations
    # =========================================================================

    async def initialize(self) -> None:
        """Create the parent directory. Failures are logged and ignored."""
        await self._submit_and_wait("initialize", self._do_initialize)

    async def read(self) -> bytes | None:
        """Return the bytes last written, or None if absent or unreadable."""
        return await self._submit_and_wait("read", self._do_read)

    def write(self, data: bytes) -> None:
        """Queue an atomic replace of the file contents and return at once."""
        self._submit(_Operation("write", lambda: write_bytes_atomic(self.path, data)))

    async def delete(self) -> None:
        """Remove the file and wait until it is gone."""
        await self._submit_and_wait("delete", lambda: remove_file(self.path))

    async def drain(self) -> None:
        """Wait until every operation submitted so far has run."""
        if self._worker is None:
            return
        await self._queue.join()

    async def close(self) -> None:
        """Run pending operations, then stop the worker."""
        await self.drain()
        if self._worker:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

    @property
    def pending(self) -> int:
        """Number of operations queued but not yet started."""
        return self._queue.qsize()

    # =========================================================================
    # Operation bodies
    # =========================================================================

    async def _do_initialize(self) -> None:
        await ensure_directory(self.path.parent)

    async def _do_read(self) -> bytes | None:
        data = await read_bytes(self.path)
        if data is None:
            return None
        try:
            data.decode(FILE_ENCODING)
        except UnicodeDecodeError:
            logger.debug(f"Cached file is not valid {FILE_ENCODING}: {self.path}")
            return None
        return data

    # =========================================================================
    # Worker plumbing
    # =========================================================================

    def _submit(self, operation: _Operation) -> None:
        self._ensure_worker()
        self._queue.put_nowait(operation)

    async def _submit_and_wait(self, name: str, run: Callable[[], Awaitable[Any]]) -> Any:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._submit(_Operation(name, run, future))
        # Shield so a cancelled caller does not cancel the queued operation
        return await asyncio.shield(future)

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._worker_loop())

    async def _worker_loop(self) -> None:
        """Run queued operations one at a time until cancelled."""
        while True:
            operation = await self._queue.get()
            result: Any = None
            try:
                result = await operation.run()
            except StorageIOError as e:
                self.last_error = e
                logger.warning(f"Sync response cache {operation.name} failed: {e.message}")
            except Exception as e:
                self.last_error = StorageIOError(operation.name, str(self.path), e)
                logger.warning(f"Unexpected error during cache {operation.name}: {e}")
            finally:
                if operation.future is not None and not operation.future.done():
                    operation.future.set_result(result)
                self._queue.task_done()
