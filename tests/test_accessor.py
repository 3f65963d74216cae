"""Tests for file operations and the serialized file accessor."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from sync_response_store import accessor as accessor_module
from sync_response_store.accessor import SerializedFileAccessor
from sync_response_store.exceptions import StorageIOError
from sync_response_store.file_ops import (
    ensure_directory,
    read_bytes,
    remove_file,
    write_bytes_atomic,
)


class TestFileOps:
    """Tests for the aiofiles primitives."""

    async def test_read_missing_file(self, temp_dir: Path) -> None:
        """Reading a missing file returns None."""
        assert await read_bytes(temp_dir / "missing") is None

    async def test_atomic_write_and_read(self, temp_dir: Path) -> None:
        """Written bytes are read back exactly."""
        path = temp_dir / "doc"
        await write_bytes_atomic(path, b'{"next_batch":"s1"}')
        assert await read_bytes(path) == b'{"next_batch":"s1"}'

    async def test_atomic_write_replaces(self, temp_dir: Path) -> None:
        """A second write replaces the first and leaves no temp files."""
        path = temp_dir / "doc"
        await write_bytes_atomic(path, b"first")
        await write_bytes_atomic(path, b"second")

        assert path.read_bytes() == b"second"
        assert [p.name for p in temp_dir.iterdir()] == ["doc"]

    async def test_write_without_directory_fails(self, temp_dir: Path) -> None:
        """Writing into a missing directory raises StorageIOError."""
        with pytest.raises(StorageIOError) as exc_info:
            await write_bytes_atomic(temp_dir / "nope" / "doc", b"x")
        assert exc_info.value.operation == "write"

    async def test_ensure_directory(self, temp_dir: Path) -> None:
        """Nested directories are created and existing ones accepted."""
        path = temp_dir / "a" / "b"
        await ensure_directory(path)
        await ensure_directory(path)
        assert path.is_dir()

    async def test_ensure_directory_under_file_fails(self, temp_dir: Path) -> None:
        """A regular file in the way raises StorageIOError."""
        (temp_dir / "file").write_text("x")
        with pytest.raises(StorageIOError):
            await ensure_directory(temp_dir / "file" / "sub")

    async def test_remove_file(self, temp_dir: Path) -> None:
        """remove_file reports whether a file was removed."""
        path = temp_dir / "doc"
        path.write_bytes(b"x")

        assert await remove_file(path) is True
        assert await remove_file(path) is False
        assert not path.exists()


class TestSerializedFileAccessor:
    """Tests for SerializedFileAccessor."""

    @pytest.fixture
    async def accessor(self, temp_dir: Path):
        """Accessor for a file two directories below the temp dir."""
        accessor = SerializedFileAccessor(temp_dir / "user" / "sub" / "syncResponse")
        yield accessor
        await accessor.close()

    async def test_initialize_creates_parent(self, accessor: SerializedFileAccessor) -> None:
        """initialize creates the parent directory."""
        await accessor.initialize()
        assert accessor.path.parent.is_dir()

    async def test_initialize_failure_swallowed(self, temp_dir: Path) -> None:
        """A failed initialize is recorded but not raised."""
        (temp_dir / "blocker").write_text("x")
        accessor = SerializedFileAccessor(temp_dir / "blocker" / "user" / "syncResponse")

        await accessor.initialize()

        assert isinstance(accessor.last_error, StorageIOError)
        assert await accessor.read() is None
        await accessor.close()

    async def test_read_absent(self, accessor: SerializedFileAccessor) -> None:
        """Reading before any write returns None."""
        await accessor.initialize()
        assert await accessor.read() is None

    async def test_write_does_not_wait(self, accessor: SerializedFileAccessor) -> None:
        """write only enqueues; the file appears once the worker runs."""
        await accessor.initialize()

        accessor.write(b"data")

        assert accessor.pending == 1
        assert not accessor.path.exists()
        await accessor.drain()
        assert accessor.path.read_bytes() == b"data"

    async def test_read_after_write(self, accessor: SerializedFileAccessor) -> None:
        """A read issued after a write observes it without awaiting the write."""
        await accessor.initialize()

        accessor.write(b"one")
        accessor.write(b"two")

        assert await accessor.read() == b"two"

    async def test_delete_after_write(self, accessor: SerializedFileAccessor) -> None:
        """A delete queued after a write removes the written file."""
        await accessor.initialize()
        accessor.write(b"data")

        await accessor.delete()

        assert await accessor.read() is None
        assert not accessor.path.exists()

    async def test_delete_missing_is_noop(self, accessor: SerializedFileAccessor) -> None:
        """Deleting an absent file succeeds quietly."""
        await accessor.initialize()
        await accessor.delete()
        await accessor.delete()
        assert accessor.last_error is None

    async def test_invalid_utf8_reads_absent(self, accessor: SerializedFileAccessor) -> None:
        """Bytes that are not UTF-8 read as absent."""
        await accessor.initialize()
        accessor.path.write_bytes(b"\xff\xfe\xfd")
        assert await accessor.read() is None

    async def test_write_failure_degrades(self, accessor: SerializedFileAccessor) -> None:
        """Without a directory the write is dropped and recorded."""
        accessor.write(b"data")
        await accessor.drain()

        assert isinstance(accessor.last_error, StorageIOError)
        assert accessor.last_error.operation == "write"
        assert await accessor.read() is None

    async def test_operations_never_overlap(
        self,
        accessor: SerializedFileAccessor,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Concurrent callers are served one at a time."""
        active = 0
        peak = 0

        async def slow_read(path: Path) -> bytes | None:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return None

        monkeypatch.setattr(accessor_module, "read_bytes", slow_read)

        results = await asyncio.gather(*(accessor.read() for _ in range(5)))

        assert results == [None] * 5
        assert peak == 1

    async def test_fifo_across_tasks(
        self,
        accessor: SerializedFileAccessor,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Operations run in submission order."""
        order: list[str] = []

        async def recording_write(path: Path, data: bytes) -> None:
            await asyncio.sleep(0)
            order.append(data.decode())

        monkeypatch.setattr(accessor_module, "write_bytes_atomic", recording_write)

        for label in ("a", "b", "c", "d"):
            accessor.write(label.encode())
        await accessor.drain()

        assert order == ["a", "b", "c", "d"]

    async def test_cancelled_caller_does_not_cancel_operation(
        self,
        accessor: SerializedFileAccessor,
    ) -> None:
        """A delete keeps running after its caller is cancelled."""
        await accessor.initialize()
        accessor.write(b"data")

        task = asyncio.create_task(accessor.delete())
        await asyncio.sleep(0)
        task.cancel()
        await accessor.drain()

        assert not accessor.path.exists()

    async def test_close_flushes_pending_writes(self, temp_dir: Path) -> None:
        """close runs queued writes before stopping the worker."""
        accessor = SerializedFileAccessor(temp_dir / "syncResponse")
        accessor.write(b"data")

        await accessor.close()

        assert (temp_dir / "syncResponse").read_bytes() == b"data"
