"""
Union and intersection resolution.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ...constants import UNDEFINED_TYPE
from ..type_graph.nodes import TypeNode, TypeSymbol
from .enums import extract_literal_value, json_type_name, sort_enum_values

if TYPE_CHECKING:
    from .schema_generator import SchemaGenerator

logger = logging.getLogger(__name__)


def _null_schema(nullable_keyword: bool) -> dict[str, Any]:
    if nullable_keyword:
        return {"type": "object", "nullable": True}
    return {"type": "null"}


def _is_null_schema(schema: dict[str, Any]) -> bool:
    return schema == {"type": "object", "nullable": True}


def build_union_definition(
    generator: SchemaGenerator,
    node: TypeNode,
    prop: TypeSymbol | None,
    union_modifier: str,
    definition: dict[str, Any],
) -> dict[str, Any]:
    """
    Resolve a union into an enum, a single merged schema, or a combinator.

    Literal members are collected into one enum schema. Members resolving
    to "undefined" are dropped and mark ``prop`` as possibly absent.
    """
    nullable_keyword = generator.config.use_nullable_keyword
    enum_values: list[Any] = []
    seen: set[tuple[str, Any]] = set()
    schemas: list[dict[str, Any]] = []

    for member in node.types:
        value = extract_literal_value(member)
        if value is not None:
            key = (json_type_name(value), value)
            if key not in seen:
                seen.add(key)
                enum_values.append(value)
            continue

        symbol = member.alias_symbol
        sub = generator.build_definition(member, prop=symbol, reffed=symbol)
        if sub.get("type") == UNDEFINED_TYPE:
            if prop is not None:
                generator.context.may_be_absent.add(prop)
            continue
        if sub.get("type") == "null":
            sub.update(_null_schema(nullable_keyword))
        schemas.append(sub)

    if enum_values:
        enum_values = sort_enum_values(enum_values)
        enum_schema: dict[str, Any] = {"enum": enum_values}

        kinds = {json_type_name(v) for v in enum_values}
        if len(enum_values) == 2 and kinds == {"boolean"}:
            # true | false is just a boolean
            del enum_schema["enum"]
        if len(kinds) == 1:
            enum_schema["type"] = kinds.pop()
        schemas.append(enum_schema)

    if nullable_keyword and len(schemas) == 2:
        nulls = [s for s in schemas if _is_null_schema(s)]
        others = [s for s in schemas if not _is_null_schema(s)]
        if len(nulls) == 1 and len(others) == 1 and "$ref" not in others[0]:
            # X | null collapses into a single nullable schema
            definition.update(others[0])
            if "enum" in others[0]:
                # An enum keeps its own type
                definition["nullable"] = True
            else:
                definition.update(nulls[0])
            return definition

    if len(schemas) == 1:
        definition.update(schemas[0])
    else:
        definition[union_modifier] = schemas
    return definition


def build_intersection_definition(generator: SchemaGenerator, node: TypeNode, definition: dict[str, Any]) -> dict[str, Any]:
    """
    Resolve an intersection into a merged schema or ``allOf``.

    Members that only contribute a bare ``{type: X}`` are folded into one
    ``type`` entry.
    """
    simple_types: list[str] = []
    schemas: list[dict[str, Any]] = []

    for member in node.types:
        sub = generator.build_definition(member)
        if sub.get("type") == UNDEFINED_TYPE:
            logger.warning("Undefined in intersection %s makes no sense", node.name)
            continue
        if list(sub) == ["type"]:
            if not isinstance(sub["type"], str):
                logger.warning("Expected only a simple type in intersection %s", node.name)
            elif sub["type"] not in simple_types:
                simple_types.append(sub["type"])
        else:
            schemas.append(sub)

    if simple_types:
        schemas.append({"type": simple_types[0] if len(simple_types) == 1 else simple_types})

    if len(schemas) == 1:
        definition.update(schemas[0])
    else:
        definition["allOf"] = schemas
    return definition
