"""
Exception types raised while building schemas and OpenAPI documents.

Fatal problems propagate as one of these exceptions and abort the current
generation call. Recoverable problems are logged as warnings instead.
"""

from __future__ import annotations

from typing import Any


class TypesToOpenApiError(Exception):
    """Base class for all errors raised by this package."""

    pass


class ConfigError(TypesToOpenApiError):
    """Raised when a generator option has an invalid value."""

    pass


class TypeGraphDiagnosticsError(TypesToOpenApiError):
    """Raised when the type graph was built with errors.

    All diagnostics are reported at once. Pass ``ignore_errors`` to
    generate anyway.
    """

    def __init__(self, diagnostics: list[Any]):
        self.diagnostics = list(diagnostics)
        lines = "\n".join(str(d) for d in self.diagnostics)
        super().__init__(f"There are errors in the source files listed below. Fix all errors or run with --ignore-errors.\n{lines}")


class UnsupportedTypeError(TypesToOpenApiError, TypeError):
    """Raised when a type cannot be converted to a schema.

    The offending type is kept on ``type`` for diagnostics.
    """

    def __init__(self, message: str, type: Any = None):
        super().__init__(message)
        self.type = type


class AnnotationValueError(TypesToOpenApiError):
    """Raised when a ``require(...)`` annotation value cannot be resolved."""

    pass


class ApiShapeError(TypesToOpenApiError):
    """Raised when an API shape type does not follow the operation contract."""

    def __init__(self, message: str, type_name: str = ""):
        super().__init__(f"{type_name}: {message}" if type_name else message)
        self.type_name = type_name


class LiteralParseError(TypesToOpenApiError, ValueError):
    """Raised when an initializer is not a plain literal."""

    pass


class OutputValidationError(TypesToOpenApiError):
    """Raised when generated output fails validation before being written."""

    pass
