"""Runtime support for named enumerations and 64-bit flag sets.

Two helpers share one error taxonomy:
  bitfield   — ``BitfieldType``: name index, symbolic/display strings and JSON
               for 64-bit masks, with lossless handling of unnamed bits
  enumtable  — ``EnumRow`` tables: ordinal lookup, case-insensitive names and
               JSON for discrete enums

Tables are built once with ``make_bitfield_type`` / ``make_enum_type`` and are
read-only afterwards.
"""

from bitenum.bitfield import (
    BITFIELD_WIDTH,
    AnnotatedBit,
    BitDescriptor,
    BitfieldType,
    make_bitfield_type,
)
from bitenum.enumtable import (
    EnumRow,
    EnumType,
    allowed_enum_names,
    dereference_enum_row,
    enum_from_json,
    enum_to_json,
    make_enum_type,
    parse_enum,
)
from bitenum.errors import (
    CombinedError,
    EnumHelperError,
    InvalidBitfieldIndexError,
    InvalidBitfieldNameError,
    InvalidEnumNameError,
    InvalidEnumValueError,
    InvalidNameError,
    InvalidValueError,
    JSONTypeError,
    NullValueError,
    is_null,
)

__version__ = "0.1.0"

__all__ = [
    "BITFIELD_WIDTH",
    "AnnotatedBit",
    "BitDescriptor",
    "BitfieldType",
    "CombinedError",
    "EnumHelperError",
    "EnumRow",
    "EnumType",
    "InvalidBitfieldIndexError",
    "InvalidBitfieldNameError",
    "InvalidEnumNameError",
    "InvalidEnumValueError",
    "InvalidNameError",
    "InvalidValueError",
    "JSONTypeError",
    "NullValueError",
    "allowed_enum_names",
    "dereference_enum_row",
    "enum_from_json",
    "enum_to_json",
    "is_null",
    "make_bitfield_type",
    "make_enum_type",
    "parse_enum",
]
