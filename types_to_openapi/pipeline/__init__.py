"""
Pipeline - type declarations to JSON Schema and OpenAPI.

This module provides a multi-phase architecture for generating schemas
from type declarations:

1. Phase 1 (Type graph): Load declarations into a provider-neutral type graph
2. Phase 2 (Analyzer): Parse annotations and build schema definitions
3. Phase 3 (OpenAPI): Assemble API shapes into operations and documents
4. Phase 4 (Writer): Optionally render and write the result atomically
"""

from __future__ import annotations

from .analyzer import SchemaGenerator, SymbolRef
from .config import GeneratorConfig
from .generator import create_generator, create_type_graph
from .openapi import OpenApiGenerator, render_redoc_html
from .type_graph import PythonTypeProvider, TypeGraph, TypeGraphProvider
from .writer import AtomicWriter

__all__ = [
    "SchemaGenerator",
    "OpenApiGenerator",
    "SymbolRef",
    "GeneratorConfig",
    "TypeGraph",
    "TypeGraphProvider",
    "PythonTypeProvider",
    "create_generator",
    "create_type_graph",
    "render_redoc_html",
    "AtomicWriter",
]
