"""
Generator factory.

Builds the type graph for a set of source files and binds an
``OpenApiGenerator`` to it. The same instance serves both schema-only and
OpenAPI generation.
"""

from __future__ import annotations

import os
import types

from .config import GeneratorConfig
from .openapi import OpenApiGenerator
from .type_graph import PythonTypeProvider, TypeGraph, TypeGraphProvider


def create_type_graph(
    sources: list[str | os.PathLike | types.ModuleType],
    working_dir: str | None = None,
    provider_class: type[TypeGraphProvider] = PythonTypeProvider,
) -> TypeGraph:
    """
    Build a type graph from source files or modules.

    Args:
        sources: Paths of Python files, or already imported modules
        working_dir: Base directory for relative declaration paths
        provider_class: Provider used to build the graph

    Returns:
        The type graph, with any load errors recorded as diagnostics
    """
    return provider_class(sources, working_dir=working_dir).build()


def create_generator(
    sources: list[str | os.PathLike | types.ModuleType],
    config: GeneratorConfig | None = None,
    working_dir: str | None = None,
) -> OpenApiGenerator:
    """
    Create a generator for the types declared in ``sources``.

    Raises:
        TypeGraphDiagnosticsError: If the sources have errors and
            ``config.ignore_errors`` is not set
    """
    return OpenApiGenerator(create_type_graph(sources, working_dir), config)
