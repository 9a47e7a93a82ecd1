"""Tests for the enum table helper."""

from __future__ import annotations

import logging

import orjson
import pytest

from bitenum.enumtable import (
    EnumRow,
    allowed_enum_names,
    dereference_enum_row,
    enum_from_json,
    enum_to_json,
    make_enum_type,
    parse_enum,
)
from bitenum.errors import (
    InvalidEnumNameError,
    InvalidEnumValueError,
    JSONTypeError,
    NullValueError,
    is_null,
)

COLOR_ROWS = (
    EnumRow("ColorRed", "red"),
    EnumRow("ColorGreen", "green", aliases=("verde", "grün")),
    EnumRow("ColorBlue", "blue"),
)

LEVEL_ROWS = (
    EnumRow("LevelLow", "low", json=b"10"),
    EnumRow("LevelHigh", "high", json=b"20"),
)


class TestLookup:
    def test_allowed_names(self) -> None:
        assert allowed_enum_names(COLOR_ROWS) == ("red", "green", "blue")

    def test_dereference(self) -> None:
        assert dereference_enum_row("Color", COLOR_ROWS, 2).symbol == "ColorBlue"

    @pytest.mark.parametrize("value", [3, 5, -1])
    def test_dereference_out_of_range(self, value: int) -> None:
        with pytest.raises(InvalidEnumValueError) as exc_info:
            dereference_enum_row("Color", COLOR_ROWS, value)
        assert exc_info.value == InvalidEnumValueError("Color", value, 3)

    def test_dereference_limit_equal_to_row_count(self) -> None:
        with pytest.raises(InvalidEnumValueError) as exc_info:
            dereference_enum_row("Color", COLOR_ROWS, 3)
        assert exc_info.value.limit == 3


class TestParseEnum:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("red", 0),
            ("GREEN", 1),
            ("colorgreen", 1),
            ("VERDE", 1),
            ("GRÜN", 1),
            ("ColorBlue", 2),
        ],
    )
    def test_case_insensitive_match(self, text: str, expected: int) -> None:
        assert parse_enum("Color", COLOR_ROWS, text) == expected

    def test_first_row_wins(self) -> None:
        rows = (EnumRow("A", "same"), EnumRow("B", "SAME"))
        assert parse_enum("Dup", rows, "same") == 0

    def test_unknown_name(self) -> None:
        with pytest.raises(InvalidEnumNameError) as exc_info:
            parse_enum("Color", COLOR_ROWS, "purple")
        err = exc_info.value
        assert err.name == "purple"
        assert err.type_name == "Color"
        assert err.allowed == ("red", "green", "blue")

    def test_lowercase_folding_only(self) -> None:
        rows = (EnumRow("RoadStreet", "straße"),)
        assert parse_enum("Road", rows, "STRAßE") == 0
        with pytest.raises(InvalidEnumNameError):
            parse_enum("Road", rows, "STRASSE")

    def test_empty_string_does_not_match_missing_symbol(self) -> None:
        rows = (EnumRow("", "only"),)
        with pytest.raises(InvalidEnumNameError):
            parse_enum("Only", rows, "")


class TestEnumToJSON:
    def test_display_name_as_json_string(self) -> None:
        assert enum_to_json("Color", COLOR_ROWS, 1) == b'"green"'

    def test_explicit_literal_verbatim(self) -> None:
        assert enum_to_json("Level", LEVEL_ROWS, 1) == b"20"

    def test_out_of_range(self) -> None:
        with pytest.raises(InvalidEnumValueError):
            enum_to_json("Color", COLOR_ROWS, 9)


class TestEnumFromJSON:
    def test_null(self) -> None:
        with pytest.raises(NullValueError) as exc_info:
            enum_from_json("Color", COLOR_ROWS, b"null")
        assert exc_info.value.value == 0
        assert is_null(exc_info.value)

    def test_string_name(self) -> None:
        assert enum_from_json("Color", COLOR_ROWS, b'"Blue"') == 2
        assert enum_from_json("Color", COLOR_ROWS, '"verde"') == 1

    def test_bare_ordinal(self) -> None:
        assert enum_from_json("Color", COLOR_ROWS, b"2") == 2

    def test_bare_ordinal_out_of_range(self) -> None:
        with pytest.raises(InvalidEnumValueError) as exc_info:
            enum_from_json("Color", COLOR_ROWS, b"3")
        assert exc_info.value.value == 3
        assert exc_info.value.limit == 3

    def test_explicit_literal_beats_ordinal(self) -> None:
        assert enum_from_json("Level", LEVEL_ROWS, b"20") == 1
        assert enum_from_json("Level", LEVEL_ROWS, b"1") == 1
        assert enum_from_json("Level", LEVEL_ROWS, b'"LOW"') == 0

    def test_unknown_string(self) -> None:
        with pytest.raises(InvalidEnumNameError):
            enum_from_json("Color", COLOR_ROWS, b'"purple"')

    @pytest.mark.parametrize("raw", [b"-1", b"-0", b"false", b"1.0", b"[0]"])
    def test_wrong_json_type_surfaces_string_error(self, raw: bytes) -> None:
        with pytest.raises(JSONTypeError) as exc_info:
            enum_from_json("Color", COLOR_ROWS, raw)
        assert exc_info.value.expected == "string"

    def test_malformed_json(self) -> None:
        with pytest.raises(orjson.JSONDecodeError):
            enum_from_json("Color", COLOR_ROWS, b"{")

    def test_none_is_a_caller_bug(self) -> None:
        with pytest.raises(TypeError):
            enum_from_json("Color", COLOR_ROWS, None)  # type: ignore[arg-type]


class TestEnumType:
    def test_methods_delegate(self) -> None:
        color = make_enum_type("Color", COLOR_ROWS)
        assert len(color) == 3
        assert color.names == ("red", "green", "blue")
        assert color.get(0).name == "red"
        assert color.from_string("GREEN") == 1
        assert color.to_json(1) == b'"green"'
        assert color.from_json(b'"blue"') == 2
        assert [row.name for row in color] == ["red", "green", "blue"]

    def test_string_forms(self) -> None:
        color = make_enum_type("Color", COLOR_ROWS)
        assert color.to_string(1) == "green"
        assert color.to_symbolic_string(1) == "ColorGreen"
        assert color.to_string(7) == "Color(7)"
        assert color.to_symbolic_string(-1) == "Color(-1)"

    def test_shadowed_names_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        rows = (EnumRow("A", "same"), EnumRow("B", "SAME"))
        with caplog.at_level(logging.WARNING, logger="bitenum.enumtable"):
            make_enum_type("Dup", rows)
        assert "row 0 shadows row 1" in caplog.text

    def test_shadowed_names_rejected_when_strict(self) -> None:
        rows = (EnumRow("A", "a"), EnumRow("B", "b", aliases=("A",)))
        with pytest.raises(ValueError, match="more than one row"):
            make_enum_type("Dup", rows, strict=True)

    def test_row_reusing_its_own_name_is_fine(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="bitenum.enumtable"):
            make_enum_type("Solo", (EnumRow("Red", "red", aliases=("RED",)),))
        assert caplog.text == ""
