"""Tests for the single-value JSON helpers."""

from __future__ import annotations

import orjson
import pytest

from bitenum import json_codec
from bitenum.errors import JSONTypeError


class TestEncode:
    def test_escapes(self) -> None:
        assert json_codec.encode_string('a"b') == b'"a\\"b"'
        assert json_codec.encode_string("") == b'""'


class TestDecodeString:
    def test_accepts_bytes_and_str(self) -> None:
        assert json_codec.decode_string(b'"x"') == "x"
        assert json_codec.decode_string('"x"') == "x"
        assert json_codec.decode_string(bytearray(b'"x"')) == "x"

    def test_rejects_other_types(self) -> None:
        with pytest.raises(JSONTypeError) as exc_info:
            json_codec.decode_string(b"12")
        assert exc_info.value.expected == "string"
        assert exc_info.value.raw == b"12"

    def test_malformed(self) -> None:
        with pytest.raises(orjson.JSONDecodeError):
            json_codec.decode_string(b"not json")


class TestDecodeUint:
    def test_accepts_unsigned(self) -> None:
        assert json_codec.decode_uint(b"0") == 0
        assert json_codec.decode_uint(b"18446744073709551615") == (1 << 64) - 1

    @pytest.mark.parametrize("raw", [b"true", b"1.0", b"-3", b"-0", b" -0", b'"3"', b"null"])
    def test_rejects_non_uint(self, raw: bytes) -> None:
        with pytest.raises(JSONTypeError):
            json_codec.decode_uint(raw)

    def test_rejects_overflow(self) -> None:
        with pytest.raises((JSONTypeError, orjson.JSONDecodeError)):
            json_codec.decode_uint(b"18446744073709551616")
        with pytest.raises(JSONTypeError):
            json_codec.decode_uint(b"300", bits=8)


def test_as_bytes_rejects_none() -> None:
    with pytest.raises(TypeError):
        json_codec.as_bytes(None)  # type: ignore[arg-type]


def test_null_literal() -> None:
    assert json_codec.is_null_literal(b"null")
    assert not json_codec.is_null_literal(b" null")
