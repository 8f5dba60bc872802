#!/usr/bin/env python3

import logging

import pytest

from types_to_openapi.pipeline.analyzer import build_enum_definition, extract_literal_value, sort_enum_values
from types_to_openapi.pipeline.type_graph import Declaration, DeclarationKind, TypeFlags, TypeNode, TypeSymbol


def enum_node(*members):
    symbol = TypeSymbol(name="Color", qualified_name="Color", declarations=[Declaration(kind=DeclarationKind.ENUM)])
    return TypeNode(flags=TypeFlags.ENUM, name="Color", symbol=symbol, enum_members=list(members))


def member(name, constant_value=None, initializer=None):
    return TypeSymbol(
        name=name,
        declarations=[Declaration(kind=DeclarationKind.ENUM_MEMBER, initializer=initializer)],
        constant_value=constant_value,
    )


class TestSortEnumValues:
    def test_sorted_by_kind_then_value(self):
        assert sort_enum_values(["b", 2, None, True, "a", 1, False]) == [None, False, True, 1, 2, "a", "b"]

    def test_mixed_numbers(self):
        assert sort_enum_values([2.5, 1, 2]) == [1, 2, 2.5]


class TestExtractLiteralValue:
    def test_literals(self):
        assert extract_literal_value(TypeNode(flags=TypeFlags.STRING_LITERAL, value="a")) == "a"
        assert extract_literal_value(TypeNode(flags=TypeFlags.NUMBER_LITERAL, value=3)) == 3
        assert extract_literal_value(TypeNode(flags=TypeFlags.BOOLEAN_LITERAL, value=False)) is False

    def test_enum_literal_text_is_read_as_number_when_possible(self):
        assert extract_literal_value(TypeNode(flags=TypeFlags.ENUM_LITERAL, value="12")) == 12
        assert extract_literal_value(TypeNode(flags=TypeFlags.ENUM_LITERAL, value="1.5")) == 1.5
        assert extract_literal_value(TypeNode(flags=TypeFlags.ENUM_LITERAL, value="red")) == "red"

    def test_non_literal(self):
        assert extract_literal_value(TypeNode(flags=TypeFlags.STRING, name="string")) is None


class TestBuildEnumDefinition:
    def test_string_enum_is_sorted(self):
        node = enum_node(member("RED", "red"), member("BLUE", "blue"), member("GREEN", "green"))
        assert build_enum_definition(node, {}) == {"type": "string", "enum": ["blue", "green", "red"]}

    def test_mixed_kinds_keep_first_seen_type_order(self):
        node = enum_node(member("ONE", 1), member("NAMED", "named"))
        assert build_enum_definition(node, {}) == {"type": ["number", "string"], "enum": [1, "named"]}

    def test_initializer_is_parsed_when_no_constant(self):
        node = enum_node(member("RED", initializer='"red"'), member("OFF", initializer="False"))
        assert build_enum_definition(node, {}) == {"type": ["string", "boolean"], "enum": [False, "red"]}

    def test_expression_initializer_is_skipped_with_warning(self, caplog):
        node = enum_node(member("RED", "red"), member("SIZE", initializer="1 + 1"), member("ALL", initializer="[1, 2]"))
        with caplog.at_level(logging.WARNING):
            definition = build_enum_definition(node, {})
        assert definition == {"type": "string", "enum": ["red"]}
        assert "initializer is expression for enum: Color.SIZE" in caplog.text
        assert "initializer is expression for enum: Color.ALL" in caplog.text

    def test_single_member(self):
        symbol = member("RED", "red")
        node = TypeNode(flags=TypeFlags.ENUM_LITERAL, name="Color.RED", symbol=symbol, value="red")
        assert build_enum_definition(node, {}) == {"type": "string", "enum": ["red"]}


if __name__ == "__main__":
    pytest.main([__file__])
