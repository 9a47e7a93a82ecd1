"""Unsigned integer literal parsing for bitfield pieces.

Accepted forms (all unsigned, no sign, no surrounding whitespace):
  decimal      — ``42``, ``1_000``
  hexadecimal  — ``0x2a``, ``0X_2A``
  octal        — ``0o52``, or legacy leading-zero ``052``
  binary       — ``0b101010``

``_`` may separate digits, and may follow a radix prefix, but may not lead,
trail, or repeat.
"""
from __future__ import annotations

import re

UINT64_LIMIT = 1 << 64

_LITERAL_RE = re.compile(
    r"""
    0[xX](?P<hex>_?[0-9a-fA-F]+(?:_[0-9a-fA-F]+)*)
    | 0[oO](?P<oct>_?[0-7]+(?:_[0-7]+)*)
    | 0[bB](?P<bin>_?[01]+(?:_[01]+)*)
    | 0(?P<legacy>_?[0-7]+(?:_[0-7]+)*)
    | (?P<dec>0|[1-9][0-9]*(?:_[0-9]+)*)
    """,
    re.VERBOSE,
)

_BASES: dict[str, int] = {"hex": 16, "oct": 8, "bin": 2, "legacy": 8, "dec": 10}


def _max_digits(base: int, bits: int) -> int:
    """Digits needed to write the largest *bits*-bit value in *base*."""
    limit = (1 << bits) - 1
    count = 1
    while limit >= base:
        limit //= base
        count += 1
    return count


def parse_uint_literal(text: str, *, bits: int = 64) -> int | None:
    """Parse *text* as an unsigned integer literal, or None if it is not one.

    Values that do not fit in *bits* bits are rejected.
    """
    match = _LITERAL_RE.fullmatch(text)
    if match is None:
        return None
    group = match.lastgroup
    if group is None:
        return None
    base = _BASES[group]
    digits = match.group(group).replace("_", "").lstrip("0") or "0"
    if len(digits) > _max_digits(base, bits):
        return None
    value = int(digits, base)
    if value >> bits:
        return None
    return value
