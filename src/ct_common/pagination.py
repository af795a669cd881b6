"""Keyset pagination over BIGINT ids (``WHERE id < :cursor ORDER BY id DESC``).

Cursors are opaque to clients: URL-safe Base64 of ``"v1:<id>"`` with padding
stripped. A cursor that does not decode is a client error, never "page one".
"""

import base64
import binascii
from collections.abc import Sequence
from typing import TypeVar

from src.ct_common.errors import InvalidCursorError

T = TypeVar("T")

_PREFIX = "v1:"


def encode_cursor(last_id: int) -> str:
    raw = f"{_PREFIX}{last_id}".encode()
    return base64.urlsafe_b64encode(raw).decode().rstrip("=")


def decode_cursor(cursor: str | None) -> int | None:
    if not cursor:
        return None
    padded = cursor + "=" * (-len(cursor) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode()).decode()
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise InvalidCursorError(cursor) from exc
    if not raw.startswith(_PREFIX) or not raw[len(_PREFIX):].isdigit():
        raise InvalidCursorError(cursor)
    return int(raw[len(_PREFIX):])


def split_page(rows: Sequence[T], limit: int) -> tuple[list[T], bool]:
    """Rows were fetched with LIMIT limit+1; the extra row only signals has_more."""
    return list(rows[:limit]), len(rows) > limit
