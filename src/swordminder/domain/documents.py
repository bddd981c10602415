"""Shared JSON document plumbing for Player and Leaderboard.

A persisted document encodes its full state to UTF-8 JSON bytes and can be
rebuilt from those bytes. Encoding and decoding problems are reported with
the two exceptions below so callers can tell them apart from I/O errors.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Protocol, runtime_checkable

__all__ = [
    "DocumentError",
    "DocumentEncodingError",
    "DocumentDecodingError",
    "PersistedDocument",
    "encode_json",
    "decode_json",
    "read_document_bytes",
]


class DocumentError(Exception):
    """Base class for document serialization problems."""


class DocumentEncodingError(DocumentError):
    """Raised when a document cannot be encoded as JSON."""


class DocumentDecodingError(DocumentError):
    """Raised when stored bytes do not describe a valid document."""


@runtime_checkable
class PersistedDocument(Protocol):
    def json(self) -> bytes: ...  # pragma: no cover - structural


def encode_json(data: Dict[str, Any], kind: str) -> bytes:
    try:
        return json.dumps(data, indent=2, ensure_ascii=False, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise DocumentEncodingError(f"{kind} is not JSON serializable: {e}") from e


def decode_json(data: bytes, kind: str) -> Dict[str, Any]:
    try:
        raw = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise DocumentDecodingError(f"{kind} data is not valid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise DocumentDecodingError(f"{kind} data must be a JSON object")
    return raw


def read_document_bytes(path: str | Path) -> bytes:
    return Path(path).read_bytes()
