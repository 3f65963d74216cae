"""
JSON encoding of cached sync responses.

The file holds one UTF-8 JSON object. Keys are sorted and separators
fixed so that equal documents always encode to identical bytes.
"""

from __future__ import annotations

import json
from typing import Any

from .constants import FILE_ENCODING
from .exceptions import DocumentDecodeError
from .models import SyncResponse


def encode_document(document: dict[str, Any]) -> bytes:
    """Encode a raw document tree to canonical UTF-8 JSON bytes."""
    return json.dumps(
        document,
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
    ).encode(FILE_ENCODING)


def decode_document(data: bytes) -> dict[str, Any]:
    """Decode bytes into a raw document tree.

    Raises:
        DocumentDecodeError: If the bytes are not UTF-8 JSON with an object root
    """
    try:
        document = json.loads(data.decode(FILE_ENCODING))
    except UnicodeDecodeError as e:
        raise DocumentDecodeError("not valid UTF-8", e) from e
    except json.JSONDecodeError as e:
        raise DocumentDecodeError("not valid JSON", e) from e
    if not isinstance(document, dict):
        raise DocumentDecodeError(f"root is {type(document).__name__}, expected object")
    return document


def encode_response(response: SyncResponse) -> bytes:
    """Encode a sync response for storage."""
    return encode_document(response.to_dict())


def decode_response(data: bytes) -> SyncResponse:
    """Decode stored bytes into a sync response.

    Raises:
        DocumentDecodeError: If the bytes do not hold a sync response
    """
    document = decode_document(data)
    try:
        return SyncResponse.from_dict(document)
    except (TypeError, ValueError, AttributeError) as e:
        raise DocumentDecodeError("unexpected document shape", e) from e
