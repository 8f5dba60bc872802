"""
Type graph provider for Python type declarations.

Loads Python source files (or already imported modules) and resolves the
TypedDicts, dataclasses, annotated classes, enums and ``type`` aliases
they define or import into a TypeGraph.

Documentation comes from docstrings:

    class Book(TypedDict):
        \"\"\"A book.

        @example {"title": "Dune"}
        \"\"\"

        title: str
        \"\"\"Title of the book.\"\"\"

        pages: Annotated[int, "@minimum 1"]

Free text is the description; ``@name value`` lines are doc-tags.
"""

from __future__ import annotations

import abc
import ast
import collections.abc
import datetime
import enum
import hashlib
import importlib.util
import inspect
import json
import logging
import os
import re
import sys
import types
import typing
from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from typing import Any

from ...utils import strip_name_noise
from .nodes import (
    Declaration,
    DeclarationKind,
    Diagnostic,
    DocComment,
    DocTag,
    ObjectFlags,
    TypeFlags,
    TypeGraph,
    TypeNode,
    TypeSymbol,
)
from .provider import TypeGraphProvider

logger = logging.getLogger(__name__)

_READ_ONLY = getattr(typing, "ReadOnly", None)

_ARRAY_ORIGINS = {
    list,
    set,
    frozenset,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
}

_MAPPING_ORIGINS = {dict, collections.abc.Mapping, collections.abc.MutableMapping}

_CALLABLE_ORIGINS = {collections.abc.Callable}

# Classes from these top-level modules are never declarations
_LIBRARY_MODULES = set(sys.stdlib_module_names) | {"builtins", "typing_extensions"}


def parse_docstring(text: str | None) -> tuple[list[DocComment], list[DocTag]]:
    """Split a docstring into documentation text and doc-tags.

    Lines starting with ``@`` open a tag; following lines up to the next tag
    continue its text.
    """
    if not text:
        return [], []
    description: list[str] = []
    tags: list[DocTag] = []
    for line in inspect.cleandoc(text).splitlines():
        stripped = line.strip()
        if stripped.startswith("@") and len(stripped) > 1:
            parts = stripped[1:].split(None, 1)
            tags.append(DocTag(name=parts[0], text=parts[1].strip() if len(parts) > 1 else ""))
        elif tags:
            if stripped:
                tags[-1].text = f"{tags[-1].text}\n{stripped}".strip()
        else:
            description.append(line)
    text = "\n".join(description).strip()
    return ([DocComment(text=text)] if text else []), tags


@dataclass
class _AttributeSource:
    position: int = 0
    initializer: str | None = None
    doc: str | None = None


@dataclass
class _ClassSource:
    position: int = 0
    doc: str | None = None
    attributes: dict[str, _AttributeSource] = field(default_factory=dict)


@dataclass
class _ModuleSource:
    """Declarations found by parsing a module's source text."""

    file_path: str = ""
    classes: dict[str, _ClassSource] = field(default_factory=dict)
    aliases: dict[str, _AttributeSource] = field(default_factory=dict)


def _following_docstring(body: list[ast.stmt], index: int) -> str | None:
    if index + 1 < len(body):
        nxt = body[index + 1]
        if isinstance(nxt, ast.Expr) and isinstance(nxt.value, ast.Constant) and isinstance(nxt.value.value, str):
            return nxt.value.value
    return None


def _initializer_source(source: str, value: ast.expr) -> str | None:
    """Source text of a default value, looking inside ``field(...)`` calls."""
    if isinstance(value, ast.Call):
        func = value.func
        func_name = func.attr if isinstance(func, ast.Attribute) else getattr(func, "id", None)
        if func_name == "field":
            for keyword in value.keywords:
                if keyword.arg == "default":
                    return ast.get_source_segment(source, keyword.value)
                if keyword.arg == "default_factory" and isinstance(keyword.value, ast.Name) and keyword.value.id == "list":
                    return "[]"
    return ast.get_source_segment(source, value)


def _index_module_source(source: str, file_path: str) -> _ModuleSource:
    tree = ast.parse(source)
    result = _ModuleSource(file_path=file_path)

    def visit(body: list[ast.stmt], prefix: str):
        for i, stmt in enumerate(body):
            if isinstance(stmt, ast.ClassDef):
                qualname = prefix + stmt.name
                result.classes[qualname] = _index_class(stmt)
                visit(stmt.body, qualname + ".")
            elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
                visit(stmt.body, prefix + stmt.name + ".<locals>.")
            elif isinstance(stmt, ast.TypeAlias) and not prefix:
                result.aliases[stmt.name.id] = _AttributeSource(position=stmt.lineno, doc=_following_docstring(body, i))

    def _index_class(node: ast.ClassDef) -> _ClassSource:
        info = _ClassSource(position=node.lineno, doc=ast.get_docstring(node))
        for i, stmt in enumerate(node.body):
            if isinstance(stmt, ast.AnnAssign) and isinstance(stmt.target, ast.Name):
                initializer = _initializer_source(source, stmt.value) if stmt.value is not None else None
                info.attributes[stmt.target.id] = _AttributeSource(stmt.lineno, initializer, _following_docstring(node.body, i))
            elif isinstance(stmt, ast.Assign) and len(stmt.targets) == 1 and isinstance(stmt.targets[0], ast.Name):
                initializer = ast.get_source_segment(source, stmt.value)
                info.attributes[stmt.targets[0].id] = _AttributeSource(stmt.lineno, initializer, _following_docstring(node.body, i))
        return info

    visit(tree.body, "")
    return result


class PythonTypeProvider(TypeGraphProvider):
    """Builds a type graph from Python modules.

    Args:
        sources: Paths of ``.py`` files, or module objects
        working_dir: Base directory for relative declaration paths
    """

    def __init__(self, sources: list[str | os.PathLike | types.ModuleType], working_dir: str | None = None):
        self.sources = list(sources)
        self.working_dir = working_dir or os.getcwd()

        self._diagnostics: list[Diagnostic] = []
        self._nodes: dict[Any, TypeNode] = {}
        self._class_nodes: dict[type, TypeNode] = {}
        self._class_symbols: dict[type, TypeSymbol] = {}
        self._alias_symbols: dict[Any, TypeSymbol] = {}
        self._member_symbols: dict[enum.Enum, TypeSymbol] = {}
        self._library_symbols: dict[str, TypeSymbol] = {}
        self._module_sources: dict[str, _ModuleSource] = {}

    def build(self) -> TypeGraph:
        graph = TypeGraph(working_dir=self.working_dir)
        self._diagnostics = graph.diagnostics
        for source in self.sources:
            module = source if isinstance(source, types.ModuleType) else self._load(os.fspath(source))
            if module is None:
                continue
            for value in list(vars(module).values()):
                if isinstance(value, typing.TypeAliasType):
                    qualified_name = self._alias_symbol(value).qualified_name
                elif self._is_declaration_class(value):
                    qualified_name = self._class_symbol(value).qualified_name
                else:
                    continue
                graph.symbols.setdefault(strip_name_noise(qualified_name), self.convert(value))
        return graph

    # ------------------------------------------------------------------
    # Module loading
    # ------------------------------------------------------------------

    def _load(self, path: str) -> types.ModuleType | None:
        path = os.path.abspath(path)
        for module in list(sys.modules.values()):
            if getattr(module, "__file__", None) and os.path.abspath(module.__file__) == path:
                return module

        stem = re.sub(r"\W", "_", os.path.splitext(os.path.basename(path))[0])
        name = stem
        if name in sys.modules or name in _LIBRARY_MODULES:
            name = f"{stem}_{hashlib.md5(path.encode('utf-8')).hexdigest()[:8]}"

        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            self._diagnostics.append(Diagnostic(f"Cannot load {path}", path, 0))
            return None
        module = importlib.util.module_from_spec(spec)
        # dataclasses and get_type_hints look the module up by name
        sys.modules[name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            del sys.modules[name]
            self._diagnostics.append(Diagnostic(f"{type(e).__name__}: {e}", path, getattr(e, "lineno", None) or 0))
            return None
        logger.debug("Loaded %s as module %s", path, name)
        return module

    def _module_source(self, module_name: str) -> _ModuleSource:
        if module_name in self._module_sources:
            return self._module_sources[module_name]
        result = _ModuleSource()
        module = sys.modules.get(module_name)
        if module is not None:
            try:
                file_path = inspect.getsourcefile(module) or ""
                with open(file_path, encoding="utf-8") as f:
                    result = _index_module_source(f.read(), file_path)
            except (OSError, TypeError, SyntaxError) as e:
                logger.debug("No source for module %s: %s", module_name, e)
        self._module_sources[module_name] = result
        return result

    def _class_source(self, cls: type) -> tuple[_ClassSource, str]:
        module_source = self._module_source(cls.__module__)
        return module_source.classes.get(cls.__qualname__, _ClassSource()), module_source.file_path

    # ------------------------------------------------------------------
    # Symbols
    # ------------------------------------------------------------------

    @staticmethod
    def _is_declaration_class(value: Any) -> bool:
        if not isinstance(value, type):
            return False
        if value.__module__.partition(".")[0] in _LIBRARY_MODULES:
            return False
        if issubclass(value, enum.Enum):
            return True
        return typing.is_typeddict(value) or bool(inspect.get_annotations(value))

    def _library_symbol(self, name: str, kind: DeclarationKind = DeclarationKind.INTERFACE) -> TypeSymbol:
        if name not in self._library_symbols:
            self._library_symbols[name] = TypeSymbol(
                name=name,
                qualified_name=name,
                declarations=[Declaration(kind=kind, from_default_lib=True)],
            )
        return self._library_symbols[name]

    def _class_symbol(self, cls: type) -> TypeSymbol:
        if cls in self._class_symbols:
            return self._class_symbols[cls]
        source, file_path = self._class_source(cls)
        documentation, tags = parse_docstring(source.doc)
        if issubclass(cls, enum.Enum):
            kind = DeclarationKind.ENUM
        elif typing.is_typeddict(cls):
            kind = DeclarationKind.INTERFACE
        else:
            kind = DeclarationKind.CLASS
        symbol = TypeSymbol(
            name=cls.__name__,
            qualified_name=f'"{cls.__module__}".{cls.__qualname__}',
            documentation=documentation,
            tags=tags,
            declarations=[
                Declaration(
                    kind=kind,
                    file_path=file_path,
                    position=source.position,
                    is_abstract=abc.ABC in cls.__bases__ or inspect.isabstract(cls),
                )
            ],
        )
        self._class_symbols[cls] = symbol
        return symbol

    def _alias_symbol(self, alias: typing.TypeAliasType) -> TypeSymbol:
        if alias in self._alias_symbols:
            return self._alias_symbols[alias]
        module_source = self._module_source(alias.__module__)
        source = module_source.aliases.get(alias.__name__, _AttributeSource())
        documentation, tags = parse_docstring(source.doc)
        symbol = TypeSymbol(
            name=alias.__name__,
            qualified_name=f'"{alias.__module__}".{alias.__name__}',
            documentation=documentation,
            tags=tags,
            declarations=[Declaration(kind=DeclarationKind.TYPE_ALIAS, file_path=module_source.file_path, position=source.position)],
        )
        self._alias_symbols[alias] = symbol
        return symbol

    def _member_symbol(self, member: enum.Enum) -> TypeSymbol:
        if member in self._member_symbols:
            return self._member_symbols[member]
        cls = type(member)
        class_source, file_path = self._class_source(cls)
        source = class_source.attributes.get(member.name, _AttributeSource())
        documentation, tags = parse_docstring(source.doc)
        value = member.value
        symbol = TypeSymbol(
            name=member.name,
            qualified_name=f"{self._class_symbol(cls).qualified_name}.{member.name}",
            documentation=documentation,
            tags=tags,
            declarations=[
                Declaration(
                    kind=DeclarationKind.ENUM_MEMBER,
                    file_path=file_path,
                    position=source.position,
                    initializer=source.initializer,
                )
            ],
            constant_value=value if isinstance(value, (str, int, float)) else None,
        )
        self._member_symbols[member] = symbol
        symbol.type = TypeNode(
            flags=TypeFlags.ENUM_LITERAL,
            name=symbol.qualified_name,
            symbol=symbol,
            value=value,
        )
        return symbol

    def _referenced_symbol(self, hint: Any) -> TypeSymbol | None:
        """Symbol named by a property annotation, if it names a declaration."""
        if isinstance(hint, typing.TypeAliasType):
            return self._alias_symbol(hint)
        if hint is int:
            return self._library_symbol("integer", DeclarationKind.TYPE_ALIAS)
        origin = typing.get_origin(hint)
        if self._is_declaration_class(origin):
            return self._class_symbol(origin)
        if self._is_declaration_class(hint):
            return self._class_symbol(hint)
        return None

    # ------------------------------------------------------------------
    # Type conversion
    # ------------------------------------------------------------------

    def convert(self, hint: Any, substitutions: dict[typing.TypeVar, TypeNode] | None = None) -> TypeNode:
        """Convert a type hint to a TypeNode.

        Nodes are shared: converting an equal hint twice returns the same node.
        """
        substitutions = substitutions or {}
        key = (hint, tuple((tv, n.id) for tv, n in substitutions.items()))
        try:
            cached = self._nodes.get(key)
        except TypeError:
            # unhashable metadata in Annotated[...]
            key, cached = None, None
        if cached is not None:
            return cached
        node = self._create(hint, substitutions, key)
        if key is not None:
            self._nodes.setdefault(key, node)
        return node

    def _create(self, hint: Any, substitutions: dict, key: Any) -> TypeNode:
        origin = typing.get_origin(hint)
        args = typing.get_args(hint)

        if isinstance(hint, typing.TypeVar):
            if hint in substitutions:
                return substitutions[hint]
            return TypeNode(flags=TypeFlags.TYPE_PARAMETER, name=hint.__name__)
        if origin in (typing.Annotated, typing.Required, typing.NotRequired, typing.ClassVar):
            return self.convert(args[0], substitutions)
        if origin is typing.Final or (_READ_ONLY is not None and origin is _READ_ONLY):
            inner = self.convert(args[0], substitutions)
            wrapper = "Final" if origin is typing.Final else "ReadOnly"
            return TypeNode(
                flags=inner.flags,
                name=f"{wrapper}[{inner.name}]",
                alias_symbol=self._library_symbol(wrapper, DeclarationKind.TYPE_ALIAS),
                alias_arguments=[inner],
            )

        if hint is typing.Any:
            return TypeNode(flags=TypeFlags.ANY, name="any")
        if hint is None or hint is type(None):
            return TypeNode(flags=TypeFlags.NULL, name="null")
        if hint is typing.Never or hint is typing.NoReturn:
            return TypeNode(flags=TypeFlags.NEVER, name="never")
        if hint is str:
            return TypeNode(flags=TypeFlags.STRING, name="string")
        if hint is bool:
            return TypeNode(flags=TypeFlags.BOOLEAN, name="boolean")
        if hint is int:
            return TypeNode(flags=TypeFlags.NUMBER, name="integer", symbol=self._library_symbol("integer", DeclarationKind.TYPE_ALIAS))
        if hint is float:
            return TypeNode(flags=TypeFlags.NUMBER, name="number")
        if hint is object:
            return TypeNode(flags=TypeFlags.NON_PRIMITIVE, name="object")
        if hint is datetime.datetime:
            return TypeNode(flags=TypeFlags.OBJECT, object_flags=ObjectFlags.INTERFACE, name="Date", symbol=self._library_symbol("Date"))

        if origin is typing.Literal:
            members = [self._literal(value) for value in args]
            return members[0] if len(members) == 1 else self._union(members)
        if origin is typing.Union or origin is types.UnionType:
            return self._union([self.convert(arg, substitutions) for arg in args])
        if isinstance(hint, typing.TypeAliasType):
            return self._alias(hint, key)

        if hint is tuple or origin is tuple:
            if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
                elements = [self.convert(arg, substitutions) for arg in args]
                return TypeNode(
                    flags=TypeFlags.OBJECT,
                    object_flags=ObjectFlags.REFERENCE | ObjectFlags.TUPLE,
                    name="[" + ", ".join(e.name for e in elements) + "]",
                    element_types=elements,
                    min_length=len(elements),
                )
            return self._array("tuple", args[0] if args else typing.Any, substitutions)
        if hint in _ARRAY_ORIGINS or origin in _ARRAY_ORIGINS:
            container = origin or hint
            return self._array(container.__name__, args[0] if args else typing.Any, substitutions)
        if hint in _MAPPING_ORIGINS or origin in _MAPPING_ORIGINS:
            key_node = self.convert(args[0] if args else str, substitutions)
            value_node = self.convert(args[1] if len(args) > 1 else typing.Any, substitutions)
            return TypeNode(
                flags=TypeFlags.OBJECT,
                object_flags=ObjectFlags.ANONYMOUS | ObjectFlags.MAPPED,
                name=f"dict[{key_node.name}, {value_node.name}]",
                symbol=TypeSymbol(
                    name="__type",
                    is_type_literal=True,
                    declarations=[Declaration(kind=DeclarationKind.MAPPED_TYPE)],
                ),
                string_index=value_node,
                alias_symbol=self._library_symbol("Record", DeclarationKind.TYPE_ALIAS),
                alias_arguments=[key_node, value_node],
            )

        if isinstance(hint, type) and issubclass(hint, enum.Enum):
            return self._enum(hint)
        if self._is_declaration_class(origin):
            return self._generic_instance(origin, args, substitutions, key)
        if self._is_declaration_class(hint):
            return self._class(hint)

        # Unresolved forward references, callables and other constructs
        return TypeNode(name=repr(hint))

    def _literal(self, value: Any) -> TypeNode:
        if isinstance(value, enum.Enum):
            return self._member_symbol(value).type
        if value is None:
            return self.convert(None)
        if isinstance(value, bool):
            return TypeNode(flags=TypeFlags.BOOLEAN_LITERAL, name=json.dumps(value), value=value)
        if isinstance(value, (int, float)):
            return TypeNode(flags=TypeFlags.NUMBER_LITERAL, name=json.dumps(value), value=value)
        if isinstance(value, str):
            return TypeNode(flags=TypeFlags.STRING_LITERAL, name=json.dumps(value), value=value)
        return TypeNode(name=repr(value))

    @staticmethod
    def _union(members: list[TypeNode]) -> TypeNode:
        return TypeNode(flags=TypeFlags.UNION, name=" | ".join(m.name for m in members), types=members)

    def _array(self, container: str, item: Any, substitutions: dict) -> TypeNode:
        item_node = self.convert(item, substitutions)
        return TypeNode(
            flags=TypeFlags.OBJECT,
            object_flags=ObjectFlags.REFERENCE,
            name=f"{container}[{item_node.name}]",
            symbol=self._library_symbol(container),
            number_index=item_node,
        )

    def _alias(self, alias: typing.TypeAliasType, key: Any) -> TypeNode:
        value = alias.__value__
        if self._is_declaration_class(value) or self._is_declaration_class(typing.get_origin(value)):
            # Alias of a declared type: the declared type keeps its own name
            return self.convert(value)

        symbol = self._alias_symbol(alias)
        # Registered before the value is converted so recursive aliases resolve
        node = TypeNode(name=symbol.qualified_name, alias_symbol=symbol)
        if key is not None:
            self._nodes[key] = node
        target = self.convert(value)
        for f in fields(TypeNode):
            if f.name not in ("id", "name", "alias_symbol", "alias_arguments"):
                setattr(node, f.name, getattr(target, f.name))
        return node

    def _enum(self, cls: type[enum.Enum]) -> TypeNode:
        if cls in self._class_nodes:
            return self._class_nodes[cls]
        symbol = self._class_symbol(cls)
        node = TypeNode(flags=TypeFlags.ENUM, name=symbol.qualified_name, symbol=symbol)
        self._class_nodes[cls] = node
        node.enum_members = [self._member_symbol(member) for member in cls]
        return node

    def _class(self, cls: type) -> TypeNode:
        if cls in self._class_nodes:
            return self._class_nodes[cls]
        symbol = self._class_symbol(cls)
        node = TypeNode(
            flags=TypeFlags.OBJECT,
            object_flags=ObjectFlags.INTERFACE if typing.is_typeddict(cls) else ObjectFlags.CLASS,
            name=symbol.qualified_name,
            symbol=symbol,
        )
        # Registered before properties are resolved so recursive classes resolve
        self._class_nodes[cls] = node
        node.properties = self._properties(cls, {})
        node.base_types = self._base_types(cls)
        return node

    def _generic_instance(self, cls: type, args: tuple, substitutions: dict, key: Any) -> TypeNode:
        symbol = self._class_symbol(cls)
        arguments = [self.convert(arg, substitutions) for arg in args]
        node = TypeNode(
            flags=TypeFlags.OBJECT,
            object_flags=(ObjectFlags.INTERFACE if typing.is_typeddict(cls) else ObjectFlags.CLASS) | ObjectFlags.REFERENCE,
            name=f"{symbol.qualified_name}[{', '.join(a.name for a in arguments)}]",
            symbol=symbol,
            alias_arguments=arguments,
        )
        if key is not None:
            self._nodes[key] = node
        parameters = getattr(cls, "__parameters__", ())
        node.properties = self._properties(cls, dict(zip(parameters, arguments)))
        node.base_types = self._base_types(cls)
        return node

    def _declaring_classes(self, cls: type) -> list[type]:
        """The class and its declared bases, including TypedDict bases."""
        result = [cls]
        for base in types.get_original_bases(cls):
            base = typing.get_origin(base) or base
            if self._is_declaration_class(base) and base not in result:
                result.extend(c for c in self._declaring_classes(base) if c not in result)
        return result

    def _base_types(self, cls: type) -> list[TypeNode]:
        return [self.convert(base) for base in types.get_original_bases(cls) if self._is_declaration_class(typing.get_origin(base) or base)]

    def _attribute_source(self, cls: type, name: str) -> tuple[_AttributeSource, str]:
        for klass in self._declaring_classes(cls):
            source, file_path = self._class_source(klass)
            if name in source.attributes:
                return source.attributes[name], file_path
        return _AttributeSource(), ""

    def _properties(self, cls: type, substitutions: dict) -> list[TypeSymbol]:
        try:
            hints = typing.get_type_hints(cls, include_extras=True)
        except (NameError, TypeError) as e:
            source, file_path = self._class_source(cls)
            self._diagnostics.append(Diagnostic(f"Cannot resolve annotations of {cls.__qualname__}: {e}", file_path, source.position))
            return []

        optional_keys = getattr(cls, "__optional_keys__", frozenset())
        dataclass_fields = {f.name: f for f in fields(cls)} if is_dataclass(cls) else {}

        properties = []
        for name, hint in hints.items():
            if typing.get_origin(hint) is typing.ClassVar:
                continue
            core, metadata, not_required = self._unwrap_property_hint(hint)
            source, file_path = self._attribute_source(cls, name)

            documentation, tags = parse_docstring(source.doc)
            for meta in metadata:
                text = meta if isinstance(meta, str) else getattr(meta, "documentation", None)
                if isinstance(text, str):
                    more_documentation, more_tags = parse_docstring(text)
                    documentation.extend(more_documentation)
                    tags.extend(more_tags)
            if len(documentation) > 1:
                documentation = [DocComment(text="\n".join(d.text for d in documentation))]

            if name in dataclass_fields:
                f = dataclass_fields[name]
                has_default = f.default is not MISSING or f.default_factory is not MISSING
            else:
                has_default = name in vars(cls) and not typing.is_typeddict(cls)

            is_method = core in _CALLABLE_ORIGINS or typing.get_origin(core) in _CALLABLE_ORIGINS
            properties.append(
                TypeSymbol(
                    name=name,
                    qualified_name=f"{self._class_symbol(cls).qualified_name}.{name}",
                    documentation=documentation,
                    tags=tags,
                    declarations=[
                        Declaration(
                            kind=DeclarationKind.PROPERTY,
                            file_path=file_path,
                            position=source.position,
                            is_private=name.startswith("_"),
                            initializer=source.initializer,
                        )
                    ],
                    type=None if is_method else self.convert(hint, substitutions),
                    is_optional=name in optional_keys or not_required or has_default,
                    is_method=is_method,
                    referenced_symbol=self._referenced_symbol(core),
                )
            )
        return properties

    @staticmethod
    def _unwrap_property_hint(hint: Any) -> tuple[Any, list[Any], bool]:
        """Strip Annotated/Required/NotRequired, collecting Annotated metadata."""
        metadata: list[Any] = []
        not_required = False
        while True:
            origin = typing.get_origin(hint)
            if origin is typing.Annotated:
                metadata.extend(hint.__metadata__)
                hint = typing.get_args(hint)[0]
            elif origin in (typing.Required, typing.NotRequired):
                not_required = not_required or origin is typing.NotRequired
                hint = typing.get_args(hint)[0]
            else:
                return hint, metadata, not_required
