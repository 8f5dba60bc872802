"""
Type graph module.

Contains the type graph model consumed by the generators and the
providers that build it.
"""

from __future__ import annotations

from .nodes import (
    LITERAL_FLAGS,
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
from .python_provider import PythonTypeProvider, parse_docstring

__all__ = [
    "LITERAL_FLAGS",
    "Declaration",
    "DeclarationKind",
    "Diagnostic",
    "DocComment",
    "DocTag",
    "ObjectFlags",
    "TypeFlags",
    "TypeGraph",
    "TypeNode",
    "TypeSymbol",
    "TypeGraphProvider",
    "PythonTypeProvider",
    "parse_docstring",
]
