"""
Literal and enum value extraction.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from ...errors import LiteralParseError
from ..type_graph.nodes import DeclarationKind, TypeFlags, TypeNode
from .literal_parser import parse_literal

logger = logging.getLogger(__name__)

PrimitiveType = str | int | float | bool | None

# Enum values sort by kind first, then natively within a kind
_KIND_RANK = {"null": 0, "boolean": 1, "number": 2, "string": 3}


def json_type_name(value: PrimitiveType) -> str:
    """JSON Schema type name of a primitive value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return "string"


def sort_enum_values(values: list[PrimitiveType]) -> list[PrimitiveType]:
    """Sort enum values reproducibly: null, booleans, numbers, then strings."""
    return sorted(values, key=lambda v: (_KIND_RANK[json_type_name(v)], 0 if v is None else v))


def _number_or_text(text: str) -> int | float | str:
    for convert in (int, float):
        try:
            number = convert(text)
        except ValueError:
            continue
        if math.isfinite(number):
            return number
    return text


def extract_literal_value(node: TypeNode) -> PrimitiveType:
    """Primitive value of a literal type, or None for other types."""
    value = node.value
    if node.has_flag(TypeFlags.STRING_LITERAL):
        return str(value)
    if node.has_flag(TypeFlags.BOOLEAN_LITERAL):
        return bool(value)
    if node.has_flag(TypeFlags.ENUM_LITERAL):
        return _number_or_text(value) if isinstance(value, str) else value
    if node.has_flag(TypeFlags.NUMBER_LITERAL):
        return _number_or_text(value) if isinstance(value, str) else value
    return None


def build_enum_definition(node: TypeNode, definition: dict[str, Any]) -> dict[str, Any]:
    """Fill a definition with the values of an enum (or of one enum member)."""
    symbol = node.symbol
    declaration = symbol.declaration
    members = node.enum_members if declaration.kind is DeclarationKind.ENUM else [symbol]

    values: list[PrimitiveType] = []
    kinds: list[str] = []

    def add(value: PrimitiveType):
        values.append(value)
        kind = json_type_name(value)
        if kind not in kinds:
            kinds.append(kind)

    for member in members:
        if member.constant_value is not None:
            add(member.constant_value)
            continue
        member_declaration = member.declaration
        initializer = member_declaration.initializer if member_declaration is not None else None
        if not initializer:
            continue
        try:
            value = parse_literal(initializer)
        except LiteralParseError:
            logger.warning("initializer is expression for enum: %s.%s", node.name, member.name)
            continue
        if isinstance(value, list):
            logger.warning("initializer is expression for enum: %s.%s", node.name, member.name)
            continue
        add(value)

    if kinds:
        definition["type"] = kinds[0] if len(kinds) == 1 else kinds
    if values:
        definition["enum"] = sort_enum_values(values)
    return definition
