"""Types to OpenAPI

A Python package for generating JSON Schema definitions and OpenAPI
documents from Python type declarations (TypedDicts, dataclasses, enums,
type aliases). Supports references, recursive types, doc-tag annotations
and ReDoc rendering.
"""

__version__ = "1.0.0"
__author__ = "François Lagunas"

from .errors import (
    AnnotationValueError,
    ApiShapeError,
    ConfigError,
    TypeGraphDiagnosticsError,
    TypesToOpenApiError,
    UnsupportedTypeError,
)
from .pipeline import (
    AtomicWriter,
    GeneratorConfig,
    OpenApiGenerator,
    PythonTypeProvider,
    SchemaGenerator,
    create_generator,
    create_type_graph,
    render_redoc_html,
)

__all__ = [
    "SchemaGenerator",
    "OpenApiGenerator",
    "GeneratorConfig",
    "PythonTypeProvider",
    "create_generator",
    "create_type_graph",
    "render_redoc_html",
    "AtomicWriter",
    "TypesToOpenApiError",
    "ConfigError",
    "TypeGraphDiagnosticsError",
    "UnsupportedTypeError",
    "AnnotationValueError",
    "ApiShapeError",
]
