"""Tests for custom property coercion and lookup."""

import xml.etree.ElementTree as ET

import pytest

from tmx_reader import (
    CustomProperties, InvalidIntegerProperty, PropertyType, PropertyTypeMismatch,
    coerce_properties, raw_property,
)
from tmx_reader.properties import parse_properties


class TestCoercion:
    """Declared type -> Python value."""

    def test_bool_true(self) -> None:
        props = coerce_properties([("solid", "bool", "true")])
        assert props["solid"].type is PropertyType.BOOL
        assert props["solid"].value is True

    @pytest.mark.parametrize("raw", ["false", "True", "yes", "1", ""])
    def test_bool_anything_else_is_false(self, raw: str) -> None:
        props = coerce_properties([("solid", "bool", raw)])
        assert props["solid"].value is False

    def test_int(self) -> None:
        props = coerce_properties([("hp", "int", "42"), ("depth", "int", "-7")])
        assert props["hp"].value == 42
        assert props["depth"].value == -7
        assert props.get_int("hp") == 42

    @pytest.mark.parametrize("raw", ["x", "", "1.5", " 4", "0x10", "2147483648", "-2147483649"])
    def test_int_failures(self, raw: str) -> None:
        with pytest.raises(InvalidIntegerProperty) as info:
            coerce_properties([("hp", "int", raw)])
        assert info.value.name == "hp"
        assert info.value.value == raw

    def test_int32_bounds(self) -> None:
        props = coerce_properties([("lo", "int", "-2147483648"), ("hi", "int", "2147483647")])
        assert props.get_int("lo") == -2147483648
        assert props.get_int("hi") == 2147483647

    @pytest.mark.parametrize("declared", [None, "", "string", "float", "color", "file", "object"])
    def test_everything_else_degrades_to_string(self, declared) -> None:
        props = coerce_properties([("label", declared, "hello")])
        assert props["label"].type is PropertyType.STRING
        assert props["label"].value == "hello"

    def test_last_write_wins(self) -> None:
        props = coerce_properties([("speed", "int", "1"), ("speed", "string", "fast")])
        assert len(props) == 1
        assert props["speed"].value == "fast"


class TestAccessors:
    """Fallback getters and strict accessors."""

    def setup_method(self) -> None:
        self.props = coerce_properties([
            ("solid", "bool", "true"),
            ("hp", "int", "3"),
            ("name", None, "door"),
        ])

    def test_getters_return_values(self) -> None:
        assert self.props.get_bool("solid") is True
        assert self.props.get_int("hp") == 3
        assert self.props.get_string("name") == "door"

    def test_getters_fall_back_on_missing_key(self) -> None:
        assert self.props.get_bool("missing", True) is True
        assert self.props.get_int("missing", 9) == 9
        assert self.props.get_string("missing", "none") == "none"

    def test_getters_fall_back_on_type_mismatch(self) -> None:
        assert self.props.get_int("solid", -1) == -1
        assert self.props.get_bool("hp", True) is True
        assert self.props.get_string("hp", "?") == "?"

    def test_strict_accessor(self) -> None:
        assert self.props["solid"].value_bool() is True
        with pytest.raises(PropertyTypeMismatch):
            self.props["hp"].value_bool()

    def test_empty_mapping(self) -> None:
        assert CustomProperties().get_int("anything", 5) == 5


class TestXml:
    """Reading <properties> blocks."""

    ELEMENT = ET.fromstring(
        '<layer>'
        ' <properties>'
        '  <property name="Z" type="int" value="2"/>'
        '  <property name="note">multi\nline</property>'
        '  <property name="tint" type="color" value="#ff00ff00"/>'
        ' </properties>'
        '</layer>'
    )

    def test_parse_properties(self) -> None:
        props = parse_properties(self.ELEMENT)
        assert props.get_int("Z") == 2
        assert props.get_string("note") == "multi\nline"
        assert props.get_string("tint") == "#ff00ff00"

    def test_missing_block(self) -> None:
        assert parse_properties(ET.fromstring('<layer/>')) == {}

    def test_raw_property(self) -> None:
        assert raw_property(self.ELEMENT, "Z") == "2"
        assert raw_property(self.ELEMENT, "absent") == ""
