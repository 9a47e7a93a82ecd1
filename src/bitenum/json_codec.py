"""Single-value JSON helpers backed by orjson.

Each helper handles exactly one scalar (a string or an unsigned integer);
there is no support for nested structures.
"""
from __future__ import annotations

import orjson

from bitenum.errors import JSONTypeError

type RawJSON = bytes | bytearray | memoryview | str

NULL_LITERAL = b"null"


def as_bytes(raw: RawJSON) -> bytes:
    """Normalize raw JSON input to ``bytes``.

    ``None`` is a caller bug, not a decode failure, and raises TypeError.
    """
    if raw is None:
        raise TypeError("raw JSON is None")
    if isinstance(raw, str):
        return raw.encode("utf-8")
    return bytes(raw)


def is_null_literal(raw: bytes) -> bool:
    return raw == NULL_LITERAL


def encode_string(text: str) -> bytes:
    """Marshal *text* as a JSON string literal."""
    return orjson.dumps(text)


def decode_string(raw: RawJSON) -> str:
    """Unmarshal a JSON string literal.

    Raises orjson.JSONDecodeError for malformed input and JSONTypeError when
    the document is valid JSON but not a string.
    """
    data = as_bytes(raw)
    obj = orjson.loads(data)
    if not isinstance(obj, str):
        raise JSONTypeError("string", data)
    return obj


def decode_uint(raw: RawJSON, *, bits: int = 64) -> int:
    """Unmarshal a JSON unsigned integer that fits in *bits* bits.

    Booleans, floats (``1.0`` included) and negative numbers are rejected.
    """
    data = as_bytes(raw)
    if data.lstrip()[:1] == b"-":
        raise JSONTypeError(f"uint{bits}", data)
    obj = orjson.loads(data)
    if isinstance(obj, bool) or not isinstance(obj, int):
        raise JSONTypeError(f"uint{bits}", data)
    if obj < 0 or obj >> bits:
        raise JSONTypeError(f"uint{bits}", data)
    return obj
