"""Error taxonomy shared by the enum and bitfield helpers.

Recoverable failures:
  NullValueError     — a JSON ``null`` was parsed; ``value`` holds the zero value
  InvalidNameError   — a string is not a known name/alias
  InvalidValueError  — a numeric value is outside ``[0, limit)``
  CombinedError      — two or more name failures from one composite string
  JSONTypeError      — well-formed JSON of the wrong kind

``InvalidBitfieldIndexError`` and ``InvalidEnumValueError`` double as
precondition violations when raised from ``BitfieldType.get`` or
``dereference_enum_row``.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence


class EnumHelperError(ValueError):
    """Base class for every error raised by bitenum."""


class NullValueError(EnumHelperError):
    """Raised when a JSON null value was parsed.

    The decoded value is always the zero value, so callers that treat null as
    "unset" can read ``err.value`` instead of special-casing.
    """

    def __init__(self, value: int = 0) -> None:
        super().__init__("JSON value is null")
        self.value = value


def is_null(err: BaseException | None) -> bool:
    """Return True iff *err* is, or was caused by, a NullValueError."""
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, NullValueError):
            return True
        seen.add(id(err))
        err = err.__cause__ or err.__context__
    return False


def _format_allowed(allowed: Sequence[str]) -> str:
    return "[" + " ".join(repr(name) for name in allowed) + "]"


class InvalidNameError(EnumHelperError):
    """Raised when a string representation could not be recognized."""

    def __init__(self, type_name: str, name: str, allowed: Sequence[str] = ()) -> None:
        self.type_name = type_name
        self.name = name
        self.allowed = tuple(allowed)
        super().__init__(self._message())

    def _message(self) -> str:
        if not self.allowed:
            return f"invalid {self.type_name} name {self.name!r}"
        return (
            f"invalid {self.type_name} name {self.name!r}; "
            f"must be one of {_format_allowed(self.allowed)}"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InvalidNameError) or type(other) is not type(self):
            return NotImplemented
        return (self.type_name, self.name, self.allowed) == (
            other.type_name, other.name, other.allowed,
        )

    def __hash__(self) -> int:
        return hash((type(self), self.type_name, self.name, self.allowed))


class InvalidEnumNameError(InvalidNameError):
    """Raised when an enum name is not a known name or alias."""


class InvalidBitfieldNameError(InvalidNameError):
    """Raised when a bitfield piece is not a known bit name, alias or number."""


class InvalidValueError(EnumHelperError):
    """Raised when a numeric value falls outside ``[0, limit)``."""

    def __init__(self, type_name: str, value: int, limit: int = 0) -> None:
        self.type_name = type_name
        self.value = value
        self.limit = limit
        super().__init__(self._message())

    def _message(self) -> str:
        if self.limit == 0:
            return f"invalid {self.type_name} value {self.value}"
        return f"invalid {self.type_name} value {self.value}; must be < {self.limit}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InvalidValueError) or type(other) is not type(self):
            return NotImplemented
        return (self.type_name, self.value, self.limit) == (
            other.type_name, other.value, other.limit,
        )

    def __hash__(self) -> int:
        return hash((type(self), self.type_name, self.value, self.limit))


class InvalidEnumValueError(InvalidValueError):
    """Raised when an enum ordinal is out of range."""


class InvalidBitfieldIndexError(InvalidValueError):
    """Raised when a bit index is not in ``[0, 64)``."""

    @property
    def index(self) -> int:
        return self.value


class CombinedError(EnumHelperError):
    """Several name failures collected from one composite bitfield string.

    Order follows the input tokens left to right.
    """

    def __init__(self, errors: Sequence[InvalidNameError]) -> None:
        self.errors = tuple(errors)
        super().__init__(self._message())

    def _message(self) -> str:
        lines = [f"{len(self.errors)} errors occurred:"]
        lines.extend(f"\t* {err}" for err in self.errors)
        return "\n".join(lines)

    def __iter__(self) -> Iterator[InvalidNameError]:
        return iter(self.errors)

    def __len__(self) -> int:
        return len(self.errors)


class JSONTypeError(EnumHelperError):
    """Raised when well-formed JSON has the wrong type for its target."""

    def __init__(self, expected: str, raw: bytes) -> None:
        self.expected = expected
        self.raw = raw
        shown = raw[:64].decode("utf-8", errors="replace")
        super().__init__(f"cannot unmarshal JSON {shown!r} into {expected}")
