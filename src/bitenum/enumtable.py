"""Enum table helper: ordinal lookup, name parsing and JSON for discrete enums.

An enum is a sequence of ``EnumRow``; a value's ordinal is its row position.
The module-level functions take the enum name and rows on every call, which
is what generated code uses. ``EnumType`` binds both once.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

import orjson

from bitenum import json_codec
from bitenum.errors import (
    InvalidEnumNameError,
    InvalidEnumValueError,
    JSONTypeError,
    NullValueError,
)
from bitenum.json_codec import RawJSON

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EnumRow:
    """One enum value.

    ``json`` is an explicit JSON literal; when None the JSON form is the
    display name as a JSON string.
    """

    symbol: str
    name: str
    json: bytes | None = None
    aliases: tuple[str, ...] = ()


def allowed_enum_names(rows: Sequence[EnumRow]) -> tuple[str, ...]:
    """Canonical display names in ordinal order."""
    return tuple(row.name for row in rows)


def dereference_enum_row(enum_name: str, rows: Sequence[EnumRow], value: int) -> EnumRow:
    """Return ``rows[value]``.

    *value* must be a valid ordinal; anything else is a caller bug and raises
    InvalidEnumValueError with ``limit == len(rows)``.
    """
    limit = len(rows)
    if not 0 <= value < limit:
        raise InvalidEnumValueError(enum_name, value, limit)
    return rows[value]


def enum_to_json(enum_name: str, rows: Sequence[EnumRow], value: int) -> bytes:
    row = dereference_enum_row(enum_name, rows, value)
    if row.json is None:
        return json_codec.encode_string(row.name)
    return bytes(row.json)


def parse_enum(enum_name: str, rows: Sequence[EnumRow], text: str) -> int:
    """Find the ordinal whose name, symbol or alias matches *text* (any case).

    The first matching row wins. Raises InvalidEnumNameError otherwise.
    """
    folded = text.lower()
    for index, row in enumerate(rows):
        for key in (row.name, row.symbol, *row.aliases):
            if key and folded == key.lower():
                return index

    raise InvalidEnumNameError(enum_name, text, allowed_enum_names(rows))


def enum_from_json(enum_name: str, rows: Sequence[EnumRow], raw: RawJSON) -> int:
    """Unmarshal an ordinal from JSON.

    Tries, in order: ``null`` (NullValueError, value 0), an explicit row
    literal, a JSON string name, then a bare ordinal (range checked). If none
    applies the string decode error is re-raised.
    """
    data = json_codec.as_bytes(raw)
    if json_codec.is_null_literal(data):
        raise NullValueError(0)

    for index, row in enumerate(rows):
        if row.json is not None and row.json == data:
            return index

    try:
        text = json_codec.decode_string(data)
    except (orjson.JSONDecodeError, JSONTypeError) as string_err:
        try:
            num = json_codec.decode_uint(data)
        except (orjson.JSONDecodeError, JSONTypeError):
            raise string_err from None
        if num >= len(rows):
            raise InvalidEnumValueError(enum_name, num, len(rows)) from None
        return num
    return parse_enum(enum_name, rows, text)


@dataclass(frozen=True, slots=True)
class EnumType:
    """An enum name bound to its rows."""

    enum_name: str
    rows: tuple[EnumRow, ...]

    @property
    def names(self) -> tuple[str, ...]:
        return allowed_enum_names(self.rows)

    def get(self, value: int) -> EnumRow:
        return dereference_enum_row(self.enum_name, self.rows, value)

    def __iter__(self) -> Iterator[EnumRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def to_string(self, value: int) -> str:
        """Display name for *value*, or ``Name(value)`` when out of range."""
        if 0 <= value < len(self.rows):
            return self.rows[value].name
        return f"{self.enum_name}({value})"

    def to_symbolic_string(self, value: int) -> str:
        """Symbolic name for *value*, or ``Name(value)`` when out of range."""
        if 0 <= value < len(self.rows):
            return self.rows[value].symbol or self.rows[value].name
        return f"{self.enum_name}({value})"

    def to_json(self, value: int) -> bytes:
        return enum_to_json(self.enum_name, self.rows, value)

    def from_string(self, text: str) -> int:
        return parse_enum(self.enum_name, self.rows, text)

    def from_json(self, raw: RawJSON) -> int:
        return enum_from_json(self.enum_name, self.rows, raw)


def make_enum_type(
    enum_name: str,
    rows: Iterable[EnumRow],
    *,
    strict: bool = False,
) -> EnumType:
    """Bind *rows* to *enum_name*.

    Names that match more than one row (ignoring case) can only ever resolve
    to the first of them; they are logged as a warning, or raise ValueError
    when *strict* is set.
    """
    table = tuple(rows)
    owner: dict[str, int] = {}
    shadowed: list[tuple[str, int, int]] = []
    for index, row in enumerate(table):
        for key in (row.name, row.symbol, *row.aliases):
            if not key:
                continue
            folded = key.lower()
            first = owner.setdefault(folded, index)
            if first != index:
                shadowed.append((key, first, index))

    if shadowed:
        details = ", ".join(
            f"{key!r} (row {first} shadows row {later})" for key, first, later in shadowed
        )
        message = f"{enum_name}: names matching more than one row: {details}"
        if strict:
            raise ValueError(message)
        log.warning(message)

    log.debug("built enum type %s with %d values", enum_name, len(table))
    return EnumType(enum_name=enum_name, rows=table)
