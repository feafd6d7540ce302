#!/usr/bin/env python3
"""
Tests for token conversion, typed values and destinations.
"""

import math
from dataclasses import dataclass

import pytest

from arena_argparser import AttributeCell, Cell, Value, VarType, attr_cell
from arena_argparser.values import convert_token, parse_floating, parse_integer, to_float32


class TestParseInteger:
    """Automatic base detection."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("0x1F", 31),
            ("0X10", 16),
            ("017", 15),
            ("00", 0),
            ("0", 0),
            ("17", 17),
            ("+42", 42),
            ("-42", -42),
            ("-0x10", -16),
            ("-010", -8),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_integer(text) == expected

    @pytest.mark.parametrize(
        "text", ["", "08", "0x", "12abc", " 12", "12 ", "1_000", "1.0", "0b101", "--1"]
    )
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_integer(text)


class TestParseFloating:
    @pytest.mark.parametrize(
        "text, expected",
        [("1.5", 1.5), ("-2", -2.0), (".5", 0.5), ("5.", 5.0), ("1e3", 1000.0), ("2.5E-1", 0.25)],
    )
    def test_valid(self, text, expected):
        assert parse_floating(text) == expected

    def test_special_values(self):
        assert math.isinf(parse_floating("inf"))
        assert math.isinf(parse_floating("-Infinity"))
        assert math.isnan(parse_floating("NaN"))

    @pytest.mark.parametrize("text", ["", "1.5x", "e3", "1e", "1_0.0", " 1.0", "0x1p3"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_floating(text)


class TestConvertToken:
    def test_integer_types_check_range(self):
        assert convert_token(VarType.INT, "-9223372036854775808") == -(2**63)
        assert convert_token(VarType.UINT, "0xffffffffffffffff") == 2**64 - 1
        with pytest.raises(ValueError):
            convert_token(VarType.INT, "9223372036854775808")
        with pytest.raises(ValueError):
            convert_token(VarType.UINT, "-1")
        with pytest.raises(ValueError):
            convert_token(VarType.UINT32, "4294967296")
        with pytest.raises(ValueError):
            convert_token(VarType.INT32, "-2147483649")

    def test_float_is_single_precision(self):
        value = convert_token(VarType.FLOAT, "0.1")
        assert value != 0.1
        assert value == pytest.approx(0.1)
        assert convert_token(VarType.DOUBLE, "0.1") == 0.1

    def test_float_overflow(self):
        with pytest.raises(OverflowError):
            convert_token(VarType.FLOAT, "1e39")

    def test_string_is_bounded(self):
        assert convert_token(VarType.STRING, "abcdef", 4) == "abc"
        assert convert_token(VarType.STRING, "ab", 4) == "ab"
        assert convert_token(VarType.STRING, "anything", 1) == ""
        assert convert_token(VarType.STRING, "-x-", 10) == "-x-"

    def test_bool(self):
        assert convert_token(VarType.BOOL, "1") is True
        assert convert_token(VarType.BOOL, "00") is False
        with pytest.raises(ValueError):
            convert_token(VarType.BOOL, "true")


class TestValue:
    def test_float_default_is_rounded(self):
        value = Value.of(VarType.FLOAT, 222.22)
        assert value.data == to_float32(222.22)
        assert Value.of(VarType.DOUBLE, 3).data == 3.0

    def test_string_default(self):
        value = Value.of(VarType.STRING, None, 8)
        assert value.data == ""
        with pytest.raises(ValueError):
            Value.of(VarType.STRING, "abc")

    def test_write_into_bounds_strings(self):
        dest = Cell()
        Value.of(VarType.STRING, "hello world", 6).write_into(dest)
        assert dest.value == "hello"

    def test_help_tags(self):
        assert VarType.INT.help_tag == "[int]"
        assert VarType.BOOL.help_tag == "[0/1]"
        assert VarType.TRUE.help_tag == ""


class TestDestinations:
    def test_cell(self):
        cell = Cell(3)
        cell.set(4)
        assert cell.get() == 4
        assert repr(cell) == "Cell(4)"
        assert Cell().value is None

    def test_attribute_cell(self):
        @dataclass
        class Config:
            count: int = 0

        config = Config()
        cell = attr_cell(config, "count")
        assert isinstance(cell, AttributeCell)
        cell.set(9)
        assert config.count == 9
        assert cell.get() == 9

    def test_attribute_cell_requires_attribute(self):
        with pytest.raises(AttributeError):
            AttributeCell(object(), "missing")
