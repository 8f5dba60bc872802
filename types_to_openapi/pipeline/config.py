"""
Configuration for the schema and OpenAPI generators.

Option files may use either the snake_case field names below or the
camelCase names used by existing option files (``ignoreRequired``,
``defaultUnionModifier``, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Callable

from ..errors import ConfigError

UNION_MODIFIERS = ("anyOf", "oneOf")
NUMBER_TYPES = ("number", "integer")
OPENAPI_VERSIONS = ("3.0.3", "3.1.0")

# camelCase option name -> field name
_CAMEL_CASE_OPTIONS = {
    "defaultProps": "default_props",
    "ignoreRequired": "ignore_required",
    "ignoreErrors": "ignore_errors",
    "uniqueNames": "unique_names",
    "defaultUnionModifier": "default_union_modifier",
    "defaultNumberType": "default_number_type",
    "nullableKeyword": "nullable_keyword",
    "defaultContentType": "default_content_type",
    "customKeywords": "custom_keywords",
    "customKeywordPrefix": "custom_keyword_prefix",
    "customOperationProperties": "custom_operation_properties",
    "schemaProcessor": "schema_processor",
    "openapiVersion": "openapi_version",
}


@dataclass
class GeneratorConfig:
    """Configuration options for schema generation."""

    # Promote named types to $ref definitions instead of inlining them
    ref: bool = False

    # Add a title (the type or property name) to definitions
    titles: bool = False

    # Add an empty defaultProperties list to object definitions
    default_props: bool = False

    # Do not compute "required" lists
    ignore_required: bool = False

    # Generate even when the type graph has diagnostics
    ignore_errors: bool = False

    # Suffix type names with a hash of their declaring file and position
    unique_names: bool = False

    # Combinator used for unions: "anyOf" or "oneOf"
    default_union_modifier: str = "anyOf"

    # Type emitted for plain numbers: "number" or "integer"
    default_number_type: str = "number"

    # Represent null as {type: object, nullable: true} instead of {type: null}.
    # None derives the value from openapi_version.
    nullable_keyword: bool | None = None

    # Content type of bodies without a contentType annotation
    default_content_type: str = "*/*"

    # Extra doc-tags copied onto definitions with the custom prefix
    custom_keywords: list[str] = field(default_factory=list)
    custom_keyword_prefix: str = "x-"

    # Copy unrecognized shape annotations and extra shape fields onto operations
    custom_operation_properties: bool = False

    # Called with every returned definition; its result replaces it
    schema_processor: Callable[[dict[str, Any]], dict[str, Any]] | None = None

    openapi_version: str = "3.0.3"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.default_union_modifier not in UNION_MODIFIERS:
            raise ConfigError(f"default_union_modifier must be one of {', '.join(UNION_MODIFIERS)}, got {self.default_union_modifier!r}")
        if self.default_number_type not in NUMBER_TYPES:
            raise ConfigError(f"default_number_type must be one of {', '.join(NUMBER_TYPES)}, got {self.default_number_type!r}")
        if self.openapi_version not in OPENAPI_VERSIONS:
            raise ConfigError(f"openapi_version must be one of {', '.join(OPENAPI_VERSIONS)}, got {self.openapi_version!r}")
        if not isinstance(self.custom_keywords, list) or not all(isinstance(k, str) for k in self.custom_keywords):
            raise ConfigError("custom_keywords must be a list of strings")
        if self.schema_processor is not None and not callable(self.schema_processor):
            raise ConfigError("schema_processor must be callable")

    @property
    def use_nullable_keyword(self) -> bool:
        """Whether null is represented with the "nullable" keyword."""
        if self.nullable_keyword is not None:
            return self.nullable_keyword
        return not self.openapi_version.startswith("3.1")

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary of options.

        Unknown keys are ignored.
        """
        known = {f.name for f in fields(GeneratorConfig)}
        kwargs = {}
        for k, v in d.items():
            name = _CAMEL_CASE_OPTIONS.get(k, k)
            if name in known:
                kwargs[name] = v
        try:
            return GeneratorConfig(**kwargs)
        except TypeError as e:
            raise ConfigError(str(e)) from e

    def to_dict(self) -> dict:
        """Convert config to a dictionary (without the schema processor)."""
        return {
            "ref": self.ref,
            "titles": self.titles,
            "default_props": self.default_props,
            "ignore_required": self.ignore_required,
            "ignore_errors": self.ignore_errors,
            "unique_names": self.unique_names,
            "default_union_modifier": self.default_union_modifier,
            "default_number_type": self.default_number_type,
            "nullable_keyword": self.nullable_keyword,
            "default_content_type": self.default_content_type,
            "custom_keywords": list(self.custom_keywords),
            "custom_keyword_prefix": self.custom_keyword_prefix,
            "custom_operation_properties": self.custom_operation_properties,
            "openapi_version": self.openapi_version,
        }
