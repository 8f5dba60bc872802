"""
Type graph node definitions.

These nodes describe resolved type declarations as produced by a type
graph provider. The generators only read them; they never mutate a node.
"""

from __future__ import annotations

import itertools
import os
from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Any

_type_ids = itertools.count(1)


class TypeFlags(Flag):
    """Primitive and structural classification of a type."""

    NONE = 0
    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    NULL = auto()
    UNDEFINED = auto()
    VOID = auto()
    ANY = auto()
    UNKNOWN = auto()
    NEVER = auto()
    NON_PRIMITIVE = auto()  # the bare "object" type
    STRING_LITERAL = auto()
    NUMBER_LITERAL = auto()
    BOOLEAN_LITERAL = auto()
    ENUM_LITERAL = auto()
    ENUM = auto()
    UNION = auto()
    INTERSECTION = auto()
    OBJECT = auto()
    TYPE_PARAMETER = auto()


LITERAL_FLAGS = (
    TypeFlags.STRING_LITERAL
    | TypeFlags.NUMBER_LITERAL
    | TypeFlags.BOOLEAN_LITERAL
    | TypeFlags.ENUM_LITERAL
)


class ObjectFlags(Flag):
    """Shape flags of object types."""

    NONE = 0
    CLASS = auto()
    INTERFACE = auto()
    REFERENCE = auto()
    TUPLE = auto()
    ANONYMOUS = auto()
    MAPPED = auto()


class DeclarationKind(Enum):
    """Syntactic kind of a declaration."""

    CLASS = "class"
    INTERFACE = "interface"
    TYPE_ALIAS = "type_alias"
    ENUM = "enum"
    ENUM_MEMBER = "enum_member"
    PROPERTY = "property"
    TYPE_LITERAL = "type_literal"
    MAPPED_TYPE = "mapped_type"


@dataclass
class DocComment:
    """One part of a documentation comment.

    ``kind`` is "text" for plain text and "linkText" for the text left
    behind by an inline cross-reference.
    """

    text: str = ""
    kind: str = "text"


@dataclass
class DocTag:
    """A doc-tag such as ``@minimum 1`` (name="minimum", text="1")."""

    name: str = ""
    text: str = ""


@dataclass(eq=False)
class Declaration:
    """Where and how a symbol was declared."""

    kind: DeclarationKind = DeclarationKind.TYPE_LITERAL
    file_path: str = ""
    position: int = 0
    is_abstract: bool = False
    is_private: bool = False

    # Source text of the initializer (default value), if any
    initializer: str | None = None

    # Declared by the language runtime rather than by user code
    from_default_lib: bool = False


@dataclass(eq=False)
class TypeSymbol:
    """A named declaration: a type, an alias, a property or an enum member."""

    name: str = ""
    qualified_name: str = ""
    documentation: list[DocComment] = field(default_factory=list)
    tags: list[DocTag] = field(default_factory=list)
    declarations: list[Declaration] = field(default_factory=list)

    # Declared type (for properties: the type at the property's location)
    type: TypeNode | None = None

    is_optional: bool = False
    is_method: bool = False
    is_type_literal: bool = False

    # For properties: the symbol named by the property's type annotation
    referenced_symbol: TypeSymbol | None = None

    # For import aliases: the symbol being re-exported
    aliased: TypeSymbol | None = None

    # For enum members: the resolved constant value, if known
    constant_value: Any = None

    @property
    def declaration(self) -> Declaration | None:
        """The canonical declaration of this symbol."""
        return self.declarations[0] if self.declarations else None

    @property
    def full_name(self) -> str:
        return self.qualified_name or self.name

    def resolve_alias(self) -> TypeSymbol:
        """Follow import aliases to the declared symbol."""
        symbol = self
        while symbol.aliased is not None:
            symbol = symbol.aliased
        return symbol

    def is_from_default_lib(self) -> bool:
        decl = self.declaration
        return decl is not None and decl.from_default_lib


@dataclass(eq=False)
class TypeNode:
    """A resolved type.

    ``name`` is the fully qualified display form of the type, which may
    include quoted module prefixes.
    """

    flags: TypeFlags = TypeFlags.NONE
    name: str = ""
    object_flags: ObjectFlags = ObjectFlags.NONE

    symbol: TypeSymbol | None = None
    alias_symbol: TypeSymbol | None = None
    alias_arguments: list[TypeNode] = field(default_factory=list)

    # Object members, in declaration order
    properties: list[TypeSymbol] = field(default_factory=list)

    # Union and intersection members
    types: list[TypeNode] = field(default_factory=list)

    # Tuple elements
    element_types: list[TypeNode] = field(default_factory=list)
    min_length: int = 0
    has_rest_element: bool = False

    # Index signatures
    number_index: TypeNode | None = None
    string_index: TypeNode | None = None

    base_types: list[TypeNode] = field(default_factory=list)

    # Literal value (string, number or boolean)
    value: Any = None

    # Members of an enum declaration
    enum_members: list[TypeSymbol] = field(default_factory=list)

    # Identity used by the name registry; copies get a fresh id
    id: int = field(default_factory=lambda: next(_type_ids), init=False)

    def __repr__(self) -> str:
        return f"TypeNode({self.name!r}, flags={self.flags})"

    def has_flag(self, flags: TypeFlags) -> bool:
        return bool(self.flags & flags)

    def is_union(self) -> bool:
        return self.has_flag(TypeFlags.UNION)

    def is_intersection(self) -> bool:
        return self.has_flag(TypeFlags.INTERSECTION)

    def is_object(self) -> bool:
        return self.has_flag(TypeFlags.OBJECT)

    def get_property(self, name: str) -> TypeSymbol | None:
        """Find a property by name, looking through intersection members."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        if self.is_intersection():
            for member in self.types:
                prop = member.get_property(name)
                if prop is not None:
                    return prop
        return None

    def get_properties(self) -> list[TypeSymbol]:
        """All properties, merged across intersection members."""
        if not self.is_intersection():
            return list(self.properties)
        merged: dict[str, TypeSymbol] = {}
        for member in self.types:
            for prop in member.get_properties():
                merged.setdefault(prop.name, prop)
        return list(merged.values())


@dataclass
class Diagnostic:
    """An error reported while building the type graph."""

    message: str = ""
    file_path: str = ""
    line: int = 0

    def __str__(self) -> str:
        if not self.file_path:
            return self.message
        return f"{self.file_path}:{self.line} - {self.message}"


@dataclass
class TypeGraph:
    """The resolved declarations available to the generators."""

    # Declared name -> declared type
    symbols: dict[str, TypeNode] = field(default_factory=dict)

    diagnostics: list[Diagnostic] = field(default_factory=list)

    # Base directory for relative declaration paths
    working_dir: str = field(default_factory=os.getcwd)

    def relative_path(self, file_path: str) -> str:
        if not file_path:
            return ""
        return os.path.relpath(file_path, self.working_dir)
