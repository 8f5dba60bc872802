"""
Schema generator that turns a type graph into JSON Schema definitions.

``build_definition`` is the recursive core. It names every type it visits,
guards against re-entering a type that is still being built, and promotes
types to ``$ref`` definitions in reference mode or to break cycles.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from ...constants import MUTABILITY_WRAPPERS, REF_KEYWORDS, UNDEFINED_TYPE
from ...errors import LiteralParseError, TypeGraphDiagnosticsError, UnsupportedTypeError
from ...utils import hash_of_declaration, is_reffable_name, strip_name_noise, unique
from ..config import GeneratorConfig
from ..type_graph.nodes import DeclarationKind, ObjectFlags, TypeFlags, TypeGraph, TypeNode, TypeSymbol
from .annotations import AnnotationParser
from .combinators import build_intersection_definition, build_union_definition
from .context import DEFINITIONS_REF_PATH, GenerationContext
from .enums import build_enum_definition, extract_literal_value, json_type_name
from .literal_parser import parse_literal

logger = logging.getLogger(__name__)

TypeNamePattern = str | re.Pattern


@dataclass
class SymbolRef:
    """A root declaration available for generation."""

    name: str
    type_name: str
    fully_qualified_name: str
    symbol: TypeSymbol | None


class SchemaGenerator:
    """Generates JSON Schema definitions from a type graph.

    One generator is bound to one type graph. Each call to ``get_schemas``
    starts from a fresh GenerationContext; schema overrides are kept across
    calls.
    """

    def __init__(self, graph: TypeGraph, config: GeneratorConfig | None = None):
        """
        Initialize the generator.

        Args:
            graph: Resolved type graph
            config: Generation options

        Raises:
            TypeGraphDiagnosticsError: If the graph has diagnostics and
                ``ignore_errors`` is not set
        """
        self.graph = graph
        self.config = config or GeneratorConfig()

        if graph.diagnostics and not self.config.ignore_errors:
            for diagnostic in graph.diagnostics:
                logger.error("%s", diagnostic)
            raise TypeGraphDiagnosticsError(graph.diagnostics)

        self.annotations = AnnotationParser(self.config)

        # Generation name -> root type
        self.symbols: dict[str, TypeNode] = {}
        self.symbol_refs: list[SymbolRef] = []

        # Base type name -> names of the root types declaring it as a base
        self.inheriting_types: dict[str, list[str]] = {}

        self.schema_overrides: dict[str, dict[str, Any]] = {}
        self.context = GenerationContext()

        self._index_symbols()

    def _index_symbols(self) -> None:
        for name, node in self.graph.symbols.items():
            symbol = self._naming_symbol(node)
            type_name = name
            if self.config.unique_names and symbol is not None and symbol.declaration is not None:
                type_name = f"{name}.{self._declaration_hash(symbol)}"
            self.symbols[type_name] = node
            self.symbol_refs.append(
                SymbolRef(
                    name=symbol.name if symbol is not None else name,
                    type_name=type_name,
                    fully_qualified_name=symbol.full_name if symbol is not None else name,
                    symbol=symbol,
                )
            )
            for base in node.base_types:
                self.inheriting_types.setdefault(base.name, []).append(type_name)

    @staticmethod
    def _naming_symbol(node: TypeNode) -> TypeSymbol | None:
        """Symbol a type is named and hashed after: its declared alias, else its own symbol."""
        if node.alias_symbol is not None and not node.alias_symbol.is_from_default_lib():
            return node.alias_symbol
        return node.symbol

    def _declaration_hash(self, symbol: TypeSymbol) -> str:
        declaration = symbol.declaration
        return hash_of_declaration(self.graph.relative_path(declaration.file_path), declaration.position)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def filter_type_names(self, type_names: list[TypeNamePattern]) -> list[str]:
        """Root names matching exact names or compiled patterns, in order."""
        matched: list[str] = []
        for type_name in type_names:
            if isinstance(type_name, re.Pattern):
                matched.extend(name for name in self.symbols if type_name.search(name))
            else:
                matched.extend(name for name in self.symbols if name == type_name)
        return unique(matched)

    def get_symbols(self, type_names: list[TypeNamePattern] | None = None) -> list[SymbolRef]:
        if not type_names:
            return list(self.symbol_refs)
        names = set(self.filter_type_names(type_names))
        return [ref for ref in self.symbol_refs if ref.type_name in names]

    def set_schema_override(self, name: str, definition: dict[str, Any]) -> None:
        """Use a fixed definition for every type named ``name``.

        Overrides survive between generation calls.
        """
        self.schema_overrides[name] = definition
        self.context.reffed_definitions[name] = definition

    def reset_schema_specific_properties(self, ref_path: str = DEFINITIONS_REF_PATH) -> None:
        self.context = GenerationContext(ref_path=ref_path)
        for name, definition in self.schema_overrides.items():
            self.context.reffed_definitions[name] = definition

    def get_schemas(self, type_names: list[TypeNamePattern]) -> dict[str, Any]:
        """
        Generate definitions for the matching root types.

        Returns:
            ``{"definitions": {name: definition}}``, including every definition
            promoted to a reference
        """
        if not type_names:
            return {}
        names = self.filter_type_names(type_names)

        self.reset_schema_specific_properties(DEFINITIONS_REF_PATH)
        root: dict[str, Any] = {"definitions": {}}
        for name in names:
            root["definitions"][name] = self.build_definition(self.symbols[name], self.config.ref)
        if self.context.reffed_definitions:
            root["definitions"] = {**root["definitions"], **self.context.reffed_definitions}
        return root

    # ------------------------------------------------------------------
    # Definition builder
    # ------------------------------------------------------------------

    @staticmethod
    def is_raw_type(node: TypeNode) -> bool:
        """Whether a type can never be promoted to a named reference."""
        symbol = node.symbol
        return symbol is None or symbol.full_name == "Date" or symbol.name == "integer" or node.number_index is not None

    @staticmethod
    def is_tuple_type(node: TypeNode) -> bool:
        return node.is_object() and bool(node.object_flags & ObjectFlags.REFERENCE) and bool(node.object_flags & ObjectFlags.TUPLE)

    def build_definition(
        self,
        node: TypeNode,
        as_ref: bool | None = None,
        union_modifier: str | None = None,
        prop: TypeSymbol | None = None,
        reffed: TypeSymbol | None = None,
        prop_annotations: tuple[dict[str, Any], dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """
        Build the definition of a type.

        Args:
            node: Type to convert
            as_ref: Return a ``$ref`` and store the definition separately
                (defaults to the ``ref`` option)
            union_modifier: "anyOf" or "oneOf" (defaults to the option)
            prop: Property owning the type; its annotations apply last
            reffed: Symbol named by the property's annotation
            prop_annotations: Already parsed annotations of ``prop``

        Returns:
            The definition, or a ``$ref`` to it
        """
        config = self.config
        ctx = self.context
        if as_ref is None:
            as_ref = config.ref
        if union_modifier is None:
            union_modifier = config.default_union_modifier

        definition: dict[str, Any] = {}

        # Mutability wrappers are transparent
        while node.alias_symbol is not None and node.alias_symbol.name in MUTABILITY_WRAPPERS and node.alias_arguments:
            node = node.alias_arguments[0]
            reffed = None

        is_type_parameter = node.has_flag(TypeFlags.TYPE_PARAMETER)
        if is_type_parameter:
            as_ref = False

        returned = definition

        # An ignored or explicitly typed property needs no further work
        if prop is not None:
            if prop_annotations is None:
                prop_annotations = self.annotations.parse_annotations(prop)
            if "ignore" in prop_annotations[0] or "type" in prop_annotations[0]:
                return dict(prop_annotations[0])

        symbol = node.symbol
        is_raw = self.is_raw_type(node)
        is_string_enum = node.is_union() and all(t.has_flag(TypeFlags.STRING_LITERAL) for t in node.types)

        as_type_alias_ref = as_ref and reffed is not None and is_string_enum
        if not as_type_alias_ref and (is_raw or node.object_flags & ObjectFlags.ANONYMOUS):
            as_ref = False
        if node.alias_arguments:
            as_ref = False

        full_type_name = self._full_type_name(node, reffed, as_type_alias_ref)

        # Re-entering a type under construction: break the cycle with a reference
        if not is_raw or node.alias_symbol is not None:
            if full_type_name in ctx.recursion_guard:
                as_ref = True
            else:
                ctx.recursion_guard[full_type_name] = definition
                if (
                    config.ref
                    and not (reffed is not None and reffed.name == "__type")
                    and not node.alias_arguments
                    and not is_type_parameter
                    and is_reffable_name(full_type_name)
                ):
                    as_ref = True

        if as_ref:
            returned = {"$ref": ctx.ref(full_type_name)}

        others: dict[str, Any] = {}
        self.annotations.parse_into(reffed, definition, others)
        self.annotations.parse_into(symbol, definition, others)
        self.annotations.parse_into(node.alias_symbol, definition, others)
        if prop_annotations is not None:
            self.annotations.merge(returned, prop_annotations[0])

        if not as_ref or full_type_name not in ctx.reffed_definitions:
            if as_ref:
                ctx.reffed_definitions[full_type_name] = definition
                if config.titles and full_type_name:
                    definition["title"] = full_type_name
            if "type" not in definition:
                self._dispatch(node, symbol, prop, reffed, as_ref, union_modifier, is_raw, definition)

        if ctx.recursion_guard.get(full_type_name) is definition:
            del ctx.recursion_guard[full_type_name]
            if full_type_name in ctx.reffed_definitions:
                annotations = {k: v for k, v in returned.items() if k in REF_KEYWORDS}
                returned = {"$ref": ctx.ref(full_type_name), **annotations}

        if config.schema_processor is not None:
            returned = config.schema_processor(returned)
        return returned

    def _full_type_name(self, node: TypeNode, reffed: TypeSymbol | None, as_type_alias_ref: bool) -> str:
        names = self.context.names
        symbol = self._naming_symbol(node)
        if as_type_alias_ref:
            target = reffed.resolve_alias()
            type_name = strip_name_noise(target.full_name)
            if self.config.unique_names and target.declaration is not None:
                return f"{type_name}.{self._declaration_hash(target)}"
            return names.make_unique(node, type_name)
        if self.config.unique_names and symbol is not None and symbol.declaration is not None and not symbol.is_from_default_lib():
            return f"{names.get_type_name(node)}.{self._declaration_hash(symbol)}"
        if reffed is not None and reffed.name in self.schema_overrides:
            return reffed.name
        return names.get_type_name(node)

    def _dispatch(
        self,
        node: TypeNode,
        symbol: TypeSymbol | None,
        prop: TypeSymbol | None,
        reffed: TypeSymbol | None,
        as_ref: bool,
        union_modifier: str,
        is_raw: bool,
        definition: dict[str, Any],
    ) -> None:
        declaration = symbol.declaration if symbol is not None else None
        if node.is_union():
            build_union_definition(self, node, prop, union_modifier, definition)
        elif node.is_intersection():
            build_intersection_definition(self, node, definition)
        elif is_raw:
            self._build_root_type_definition(node, reffed, definition)
        elif self.is_tuple_type(node):
            self._build_tuple_definition(node, definition)
        elif declaration is not None and declaration.kind in (DeclarationKind.ENUM, DeclarationKind.ENUM_MEMBER):
            build_enum_definition(node, definition)
        elif symbol is not None and symbol.is_type_literal and not node.properties:
            definition["type"] = "object"
            definition["properties"] = {}
            # Mapped types such as dict[str, X] describe their values
            if declaration is not None and declaration.kind is DeclarationKind.MAPPED_TYPE and node.string_index is not None:
                definition["additionalProperties"] = self.build_definition(node.string_index, as_ref, union_modifier)
        else:
            self._build_class_definition(node, definition)

    def _build_root_type_definition(self, node: TypeNode, reffed: TypeSymbol | None, definition: dict[str, Any]) -> None:
        if self.is_tuple_type(node):
            self._build_tuple_definition(node, definition)
            return

        if node.has_flag(TypeFlags.STRING):
            definition["type"] = "string"
        elif node.has_flag(TypeFlags.NUMBER):
            is_integer = (
                (reffed is not None and reffed.name == "integer")
                or (node.symbol is not None and node.symbol.name == "integer")
                or self.config.default_number_type == "integer"
            )
            definition["type"] = "integer" if is_integer else "number"
        elif node.has_flag(TypeFlags.BOOLEAN):
            definition["type"] = "boolean"
        elif node.has_flag(TypeFlags.NULL):
            if self.config.use_nullable_keyword:
                definition["type"] = "object"
                definition["nullable"] = True
            else:
                definition["type"] = "null"
        elif node.has_flag(TypeFlags.UNDEFINED | TypeFlags.VOID):
            definition["type"] = UNDEFINED_TYPE
        elif node.has_flag(TypeFlags.ANY | TypeFlags.UNKNOWN | TypeFlags.TYPE_PARAMETER):
            # No restriction
            pass
        elif node.symbol is not None and node.symbol.full_name == "Date":
            definition["type"] = "string"
            definition["format"] = definition.get("format") or "date-time"
        elif node.has_flag(TypeFlags.NON_PRIMITIVE):
            definition["type"] = "object"
            definition["properties"] = {}
            definition["additionalProperties"] = True
        else:
            value = extract_literal_value(node)
            if value is not None:
                definition["type"] = json_type_name(value)
                definition["enum"] = [value]
            elif node.number_index is not None:
                definition["type"] = "array"
                if "items" not in definition:
                    definition["items"] = self.build_definition(node.number_index)
            else:
                raise UnsupportedTypeError(f"Unsupported type: {node.name}", node)

    def _build_tuple_definition(self, node: TypeNode, definition: dict[str, Any]) -> None:
        items = [self.build_definition(element) for element in node.element_types]
        definition["type"] = "array"
        if items:
            definition["items"] = items
        definition["minItems"] = node.min_length
        if not node.has_rest_element:
            definition["maxItems"] = len(node.element_types)

    def _build_class_definition(self, node: TypeNode, definition: dict[str, Any]) -> None:
        symbol = node.symbol
        declaration = symbol.declaration if symbol is not None else None
        if declaration is None:
            definition["type"] = "object"
            return

        props = [
            p
            for p in node.get_properties()
            if not (p.type is not None and p.type.flags == TypeFlags.NEVER) and not any(d.is_private for d in p.declarations)
        ]

        # Abstract bases resolve to their concrete subtypes
        if declaration.is_abstract and self.inheriting_types.get(node.name):
            definition["oneOf"] = [self.build_definition(self.symbols[name]) for name in self.inheriting_types[node.name]]
            return

        properties: dict[str, Any] = {}
        kept: list[tuple[TypeSymbol, dict[str, Any]]] = []
        for prop in props:
            result = self._build_property_definition(prop)
            if result is None:
                continue
            prop_definition, annotations = result
            properties[prop.name] = prop_definition
            kept.append((prop, annotations))

        definition.setdefault("type", "object")
        if definition["type"] == "object" and properties:
            definition["properties"] = properties
        if self.config.default_props:
            definition["defaultProperties"] = []

        if not self.config.ignore_required:
            required = [
                prop.name
                for prop, annotations in kept
                if not prop.is_optional and not prop.is_method and prop not in self.context.may_be_absent and "ignore" not in annotations
            ]
            if required:
                definition["required"] = sorted(unique(required))

    def _build_property_definition(self, prop: TypeSymbol) -> tuple[dict[str, Any], dict[str, Any]] | None:
        """Definition of one property with its parsed annotations, or None if it is dropped."""
        if prop.is_method or prop.type is None:
            return None

        annotations, others = self.annotations.parse_annotations(prop)
        definition = self.build_definition(
            prop.type,
            prop=prop,
            reffed=prop.referenced_symbol,
            prop_annotations=(annotations, others),
        )

        if definition.get("type") == UNDEFINED_TYPE:
            return None
        if self.config.titles and "$ref" not in definition:
            definition["title"] = prop.name
        if "ignore" in definition:
            return None

        declaration = prop.declaration
        if declaration is not None and declaration.initializer is not None:
            try:
                definition["default"] = parse_literal(declaration.initializer)
            except LiteralParseError as e:
                logger.warning("Cannot read default value of property %s: %s", prop.name, e)

        return definition, annotations
