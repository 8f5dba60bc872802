"""
Annotation parser.

Turns the documentation and doc-tags of a symbol into definition keywords.
Recognized tags (JSON Schema validation keywords, OpenAPI operation
keywords, and configured custom keywords) are copied onto the definition;
any other tag is returned separately so callers can act on it.
"""

from __future__ import annotations

import hashlib
import importlib
import importlib.util
import json
import os
import types
from typing import Any

from ...constants import OPERATION_KEYWORDS, REGEX_REQUIRE, VALIDATION_KEYWORDS, KeywordKind
from ...errors import AnnotationValueError
from ..config import GeneratorConfig
from ..type_graph.nodes import TypeSymbol


class AnnotationParser:
    """Parses symbol documentation into definition fragments."""

    def __init__(self, config: GeneratorConfig):
        self.config = config
        self.keywords: dict[str, KeywordKind] = {}
        self.keywords.update({k: KeywordKind.VALIDATION for k in VALIDATION_KEYWORDS})
        self.keywords.update({k: KeywordKind.OPERATION for k in OPERATION_KEYWORDS})
        self.keywords.update({k: KeywordKind.CUSTOM for k in config.custom_keywords})
        self._required_modules: dict[str, Any] = {}

    def keyword_name(self, name: str) -> str | None:
        """Name under which a recognized tag is stored, or None."""
        kind = self.keywords.get(name)
        if kind is None:
            return None
        if kind is KeywordKind.CUSTOM:
            return self.config.custom_keyword_prefix + name
        return name

    def parse_annotations(self, symbol: TypeSymbol | None) -> tuple[dict[str, Any], dict[str, Any]]:
        """
        Parse the annotations of a symbol.

        Returns:
            (recognized keywords, other annotations by tag name)
        """
        definition: dict[str, Any] = {}
        others: dict[str, Any] = {}
        self.parse_into(symbol, definition, others)
        return definition, others

    def parse_into(self, symbol: TypeSymbol | None, definition: dict[str, Any], others: dict[str, Any]) -> None:
        """Parse the annotations of a symbol into an existing definition."""
        if symbol is None:
            return

        if not symbol.is_from_default_lib() and symbol.documentation:
            parts = []
            for comment in symbol.documentation:
                text = comment.text.replace("\r\n", "\n")
                # An unresolved inline link leaves dangling whitespace behind
                parts.append(text.strip() if comment.kind == "linkText" else text)
            definition["description"] = "".join(parts).strip()

        for tag in symbol.tags:
            name = tag.name
            text = tag.text

            # Older doc parsers split "@body.contentType x" into "body" and ".contentType x"
            if text.startswith("."):
                value_parts = text[1:].split(" ")
                keyword = self.keyword_name(value_parts[0])
                if keyword is not None:
                    value = self.parse_value(symbol, value_parts[0], " ".join(value_parts[1:])) if len(value_parts) > 1 and value_parts[1] else True
                    self._merge_sub_keyword(definition, name, keyword, value)
                    continue

            if "." in name:
                name_parts = name.split(".")
                keyword = self.keyword_name(name_parts[1]) if len(name_parts) == 2 else None
                if keyword is not None:
                    value = self.parse_value(symbol, name, text) if text else True
                    self._merge_sub_keyword(definition, name_parts[0], keyword, value)
                    continue

            keyword = self.keyword_name(name)
            if keyword is not None:
                definition[keyword] = self.parse_value(symbol, name, text) if text else True
            else:
                others[name] = self.parse_value(symbol, name, text) if text else True

    @staticmethod
    def _merge_sub_keyword(definition: dict[str, Any], parent: str, keyword: str, value: Any) -> None:
        existing = definition.get(parent)
        definition[parent] = {**(existing if isinstance(existing, dict) else {}), keyword: value}

    @staticmethod
    def merge(target: dict[str, Any], fragment: dict[str, Any]) -> None:
        """Merge a parsed fragment into a definition, merging dotted sub-keywords."""
        for key, value in fragment.items():
            existing = target.get(key)
            if isinstance(value, dict) and isinstance(existing, dict) and key not in ("items", "properties"):
                target[key] = {**existing, **value}
            else:
                target[key] = value

    def parse_value(self, symbol: TypeSymbol, key: str, value: str) -> Any:
        """Resolve a tag value: external reference, JSON, or the raw text."""
        match = REGEX_REQUIRE.match(value)
        if match:
            file_name = match.group(2)[1:-1].strip()
            return self.resolve_required(symbol, key, file_name, match.group(4))
        try:
            return json.loads(value)
        except ValueError:
            return value

    def resolve_required(self, symbol: TypeSymbol, key: str, file_name: str, object_name: str | None) -> Any:
        """
        Load a value from ``require(<file>)[.<name>]``.

        Relative paths resolve against the declaring file. ``.py`` files and
        dotted module names expose their attributes; ``.json`` files expose
        their top-level keys. Without a name, the ``default`` attribute of a
        module (or the whole JSON document) is used.
        """
        declaration = symbol.declaration
        declaring_file = declaration.file_path if declaration is not None else ""
        base_dir = os.path.dirname(os.path.abspath(declaring_file)) if declaring_file else os.getcwd()

        if file_name.startswith((".", "/")):
            path = os.path.abspath(declaring_file) if file_name == "." else os.path.normpath(os.path.join(base_dir, file_name))
            loaded = self._load_file(path)
        else:
            try:
                loaded = importlib.import_module(file_name)
            except ImportError as e:
                raise AnnotationValueError(f"Required: File couldn't be loaded ({file_name})") from e

        if isinstance(loaded, types.ModuleType):
            value = getattr(loaded, object_name or "default", None)
        elif object_name:
            value = loaded.get(object_name) if isinstance(loaded, dict) else None
        else:
            value = loaded

        if value is None:
            raise AnnotationValueError("Required: Variable is undefined")
        if callable(value):
            raise AnnotationValueError("Required: Can't use function as a variable")
        if key == "examples" and not isinstance(value, list):
            raise AnnotationValueError("Required: Variable isn't an array")
        return value

    def _load_file(self, path: str) -> Any:
        if path in self._required_modules:
            return self._required_modules[path]
        if not os.path.exists(path) and os.path.exists(path + ".py"):
            path = path + ".py"
        try:
            if path.endswith(".json"):
                with open(path, encoding="utf-8") as f:
                    loaded = json.load(f)
            else:
                name = "_required_" + hashlib.md5(path.encode("utf-8")).hexdigest()[:8]
                spec = importlib.util.spec_from_file_location(name, path)
                if spec is None or spec.loader is None:
                    raise ImportError(f"Cannot load {path}")
                loaded = importlib.util.module_from_spec(spec)
                spec.loader.exec_module(loaded)
        except (OSError, ImportError, SyntaxError, ValueError) as e:
            raise AnnotationValueError(f"Required: File couldn't be loaded ({path})") from e
        self._required_modules[path] = loaded
        return loaded
