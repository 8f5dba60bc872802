"""
Analyzer module.

Contains annotation parsing, literal and enum extraction, union and
intersection resolution, naming, and the recursive definition builder.
"""

from __future__ import annotations

from .annotations import AnnotationParser
from .context import COMPONENTS_REF_PATH, DEFINITIONS_REF_PATH, GenerationContext
from .enums import build_enum_definition, extract_literal_value, sort_enum_values
from .literal_parser import parse_literal
from .name_resolver import NameRegistry
from .schema_generator import SchemaGenerator, SymbolRef, TypeNamePattern

__all__ = [
    "AnnotationParser",
    "COMPONENTS_REF_PATH",
    "DEFINITIONS_REF_PATH",
    "GenerationContext",
    "NameRegistry",
    "SchemaGenerator",
    "SymbolRef",
    "TypeNamePattern",
    "build_enum_definition",
    "extract_literal_value",
    "parse_literal",
    "sort_enum_values",
]
