"""
File operations for the sync response cache file.

Provides the async primitives the serialized accessor runs:
- Directory creation
- Whole-file byte reads
- Atomic writes using temp file + replace
- Removal that treats a missing file as success

All failures are raised as StorageIOError; deciding whether to degrade
is left to the caller.
"""

import os
import tempfile
from pathlib import Path

import aiofiles
import aiofiles.os

from .exceptions import StorageIOError


async def ensure_directory(path: Path) -> None:
    """Ensure directory exists, creating if necessary.

    Args:
        path: Directory path to ensure exists
    """
    try:
        await aiofiles.os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise StorageIOError("create_directory", str(path), e) from e


async def read_bytes(path: Path) -> bytes | None:
    """Read a whole file.

    Args:
        path: Path to read

    Returns:
        File contents, or None if the file doesn't exist
    """
    try:
        async with aiofiles.open(path, "rb") as f:
            return await f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise StorageIOError("read", str(path), e) from e


async def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write a file atomically using temp file + replace.

    Readers see either the previous contents or the new contents,
    never a partial write. The parent directory must already exist.

    Args:
        path: Target path
        data: Bytes to write
    """
    try:
        fd, temp_path = tempfile.mkstemp(
            dir=path.parent,
            prefix=".tmp_",
            suffix=f".{path.name}",
        )
    except OSError as e:
        raise StorageIOError("write", str(path), e) from e

    try:
        os.close(fd)
        async with aiofiles.open(temp_path, "wb") as f:
            await f.write(data)
            await f.flush()
            os.fsync(f.fileno())

        # Atomic replace
        await aiofiles.os.replace(temp_path, path)
    except Exception as e:
        # Clean up temp file on error
        try:
            await aiofiles.os.remove(temp_path)
        except OSError:
            pass
        raise StorageIOError("write", str(path), e) from e


async def remove_file(path: Path) -> bool:
    """Remove a file if it exists.

    Args:
        path: Path to remove

    Returns:
        True if file was removed, False if it didn't exist
    """
    try:
        await aiofiles.os.remove(path)
        return True
    except FileNotFoundError:
        return False
    except OSError as e:
        raise StorageIOError("remove", str(path), e) from e
