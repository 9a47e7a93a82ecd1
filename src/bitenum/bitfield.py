"""Bitfield engine: name index, string/JSON rendering and parsing for 64-bit masks.

A bitfield type is described by a sequence of up to 64 ``BitDescriptor``
rows; row ``i`` describes the bit ``1 << i``. Rows with neither a symbol nor
a display name are reserved bits. Set bits without a name are carried as a
"remnant" so values survive round trips through older type definitions:

  symbolic form  — ``READ|WRITE|Perm(0x80)``   (lossless)
  display form   — ``read|write|0x80``
  JSON form      — ``"read|write|0x80"``       (display form as a JSON string)

Both text forms render zero as a single remnant token: ``Perm(0)`` / ``0``.

Lookups are case-insensitive: the index stores every key both as given and
lowercased, so a lookup is at most two dict probes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

import orjson

from bitenum import json_codec
from bitenum.errors import (
    CombinedError,
    InvalidBitfieldIndexError,
    InvalidBitfieldNameError,
    JSONTypeError,
    NullValueError,
)
from bitenum.json_codec import RawJSON
from bitenum.numeric import UINT64_LIMIT, parse_uint_literal

log = logging.getLogger(__name__)

BITFIELD_WIDTH = 64
MASK_LIMIT = UINT64_LIMIT


# ---------------------------------------------------------------------------
# Descriptor types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BitDescriptor:
    """Caller-supplied description of one bit."""

    symbol: str = ""    # constant name, e.g. "PermRead"
    name: str = ""      # display name, e.g. "read"
    aliases: tuple[str, ...] = ()

    @property
    def is_named(self) -> bool:
        return bool(self.symbol or self.name)


@dataclass(frozen=True, slots=True)
class AnnotatedBit:
    """A BitDescriptor plus its position; ``bit == 1 << index``."""

    symbol: str
    name: str
    aliases: tuple[str, ...]
    index: int
    bit: int

    @property
    def is_named(self) -> bool:
        return bool(self.symbol or self.name)

    @property
    def display_name(self) -> str:
        return self.name or self.symbol

    @property
    def symbolic_name(self) -> str:
        return self.symbol or self.name


def _annotate(descriptor: BitDescriptor, index: int) -> AnnotatedBit:
    return AnnotatedBit(
        symbol=descriptor.symbol,
        name=descriptor.name,
        aliases=tuple(descriptor.aliases),
        index=index,
        bit=1 << index,
    )


def _check_mask(type_name: str, value: int) -> None:
    if not 0 <= value < MASK_LIMIT:
        raise ValueError(f"{type_name} value {value} does not fit in 64 bits")


# ---------------------------------------------------------------------------
# BitfieldType
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BitfieldType:
    """Immutable description of one bitfield kind.

    Build with ``make_bitfield_type``. ``data`` always holds 64 entries,
    ``names`` lists the display names of the named bits in index order, and
    ``by_name`` maps every name, symbol and alias (as given and lowercased)
    to its bit.
    """

    type_name: str
    data: tuple[AnnotatedBit, ...]
    names: tuple[str, ...]
    by_name: Mapping[str, AnnotatedBit]

    def __post_init__(self) -> None:
        if len(self.data) != BITFIELD_WIDTH:
            raise ValueError(
                f"data must hold {BITFIELD_WIDTH} entries, got {len(self.data)}",
            )

    def get(self, index: int) -> AnnotatedBit:
        """Return the entry for bit *index*.

        *index* must be in ``[0, 64)``; anything else is a caller bug and
        raises InvalidBitfieldIndexError.
        """
        if not 0 <= index < BITFIELD_WIDTH:
            raise InvalidBitfieldIndexError(self.type_name, index, BITFIELD_WIDTH)
        return self.data[index]

    def __iter__(self) -> Iterator[AnnotatedBit]:
        return iter(self.data)

    def __len__(self) -> int:
        return BITFIELD_WIDTH

    # -- rendering ----------------------------------------------------------

    def _render(
        self,
        value: int,
        piece_for: Callable[[AnnotatedBit], str],
        remnant_token: Callable[[int], str],
    ) -> str:
        _check_mask(self.type_name, value)
        pieces: list[str] = []
        remnant = 0
        for entry in self.data:
            if not value & entry.bit:
                continue
            piece = piece_for(entry)
            if piece:
                pieces.append(piece)
            else:
                remnant |= entry.bit
        if remnant or not pieces:
            pieces.append(remnant_token(remnant))
        return "|".join(pieces)

    def to_symbolic_string(self, value: int) -> str:
        """Render *value* with symbolic names; unknown bits as ``Type(0x..)``."""
        def remnant_token(remnant: int) -> str:
            if remnant == 0:
                return f"{self.type_name}(0)"
            return f"{self.type_name}(0x{remnant:x})"

        return self._render(value, lambda entry: entry.symbolic_name, remnant_token)

    def to_string(self, value: int) -> str:
        """Render *value* with display names; unknown bits as ``0x..``."""
        def remnant_token(remnant: int) -> str:
            if remnant == 0:
                return "0"
            return f"0x{remnant:x}"

        return self._render(value, lambda entry: entry.display_name, remnant_token)

    def to_json(self, value: int) -> bytes:
        """Marshal *value* as a JSON string holding its display form."""
        return json_codec.encode_string(self.to_string(value))

    # -- parsing ------------------------------------------------------------

    def parse_item(self, text: str) -> int | None:
        """Resolve a single piece to its mask, or None if unrecognized.

        Accepts a name, symbol or alias (any case), ``0``, an unsigned integer
        literal, or any of those wrapped as ``Type(...)``. Integer literals are
        returned as given, including bits that have no name.
        """
        prefix = self.type_name + "("
        if len(text) > len(prefix) and text.startswith(prefix) and text.endswith(")"):
            text = text[len(prefix):-1]

        entry = self.by_name.get(text)
        if entry is None:
            entry = self.by_name.get(text.lower())
        if entry is not None:
            return entry.bit

        if text == "0":
            return 0
        return parse_uint_literal(text)

    def from_string(self, text: str) -> int:
        """Parse a display or symbolic string back into a mask.

        Raises InvalidBitfieldNameError when one ``|`` piece is unrecognized
        and CombinedError (one entry per bad piece, in order) when several are.
        """
        whole = self.parse_item(text)
        if whole is not None:
            return whole

        accum = 0
        errors: list[InvalidBitfieldNameError] = []
        for piece in text.split("|"):
            value = self.parse_item(piece)
            if value is None:
                errors.append(InvalidBitfieldNameError(self.type_name, piece, self.names))
            else:
                accum |= value

        if not errors:
            return accum
        if len(errors) == 1:
            raise errors[0]
        raise CombinedError(errors)

    def from_json(self, raw: RawJSON) -> int:
        """Unmarshal a mask from JSON.

        Accepts a JSON string (parsed with ``from_string``) or a bare unsigned
        integer (returned unmasked). ``null`` raises NullValueError with a
        value of 0. Anything else re-raises the string decode error.
        """
        data = json_codec.as_bytes(raw)
        if json_codec.is_null_literal(data):
            raise NullValueError(0)

        try:
            text = json_codec.decode_string(data)
        except (orjson.JSONDecodeError, JSONTypeError) as string_err:
            try:
                return json_codec.decode_uint(data)
            except (orjson.JSONDecodeError, JSONTypeError):
                raise string_err from None
        return self.from_string(text)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def _index_key(
    by_name: dict[str, AnnotatedBit],
    key: str,
    entry: AnnotatedBit,
    collisions: list[tuple[str, int, int]],
) -> None:
    for k in (key, key.lower()):
        previous = by_name.get(k)
        if previous is not None and previous.index != entry.index:
            collisions.append((k, previous.index, entry.index))
        by_name[k] = entry


def make_bitfield_type(
    type_name: str,
    descriptors: Iterable[BitDescriptor],
    *,
    strict: bool = False,
) -> BitfieldType:
    """Build a BitfieldType from up to 64 descriptors.

    Extra descriptors are dropped and a key claimed by two different bits maps
    to the later bit. Both are logged as warnings, or raise ValueError when
    *strict* is set.
    """
    rows = list(descriptors)
    if len(rows) > BITFIELD_WIDTH:
        message = (
            f"{type_name}: {len(rows)} bit descriptors given, "
            f"only the first {BITFIELD_WIDTH} are used"
        )
        if strict:
            raise ValueError(message)
        log.warning(message)
        rows = rows[:BITFIELD_WIDTH]

    data: list[AnnotatedBit] = []
    names: list[str] = []
    by_name: dict[str, AnnotatedBit] = {}
    collisions: list[tuple[str, int, int]] = []

    for index in range(BITFIELD_WIDTH):
        descriptor = rows[index] if index < len(rows) else BitDescriptor()
        entry = _annotate(descriptor, index)
        data.append(entry)
        if not entry.is_named:
            continue

        names.append(entry.display_name)
        for key in (entry.symbol, entry.name, *entry.aliases):
            if key:
                _index_key(by_name, key, entry, collisions)

    if collisions:
        details = ", ".join(
            f"{key!r} (bit {old} -> bit {new})" for key, old, new in collisions
        )
        message = f"{type_name}: names claimed by more than one bit: {details}"
        if strict:
            raise ValueError(message)
        log.warning(message)

    log.debug("built bitfield type %s with %d named bits", type_name, len(names))
    return BitfieldType(
        type_name=type_name,
        data=tuple(data),
        names=tuple(names),
        by_name=MappingProxyType(by_name),
    )
