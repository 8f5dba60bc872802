"""
Keyword tables and patterns shared by the annotation parser and generators.
"""

import re
from enum import Enum


class KeywordKind(Enum):
    """Classification of a recognized annotation keyword."""

    VALIDATION = "validation"  # JSON Schema keyword, copied as-is
    OPERATION = "operation"  # OpenAPI operation keyword, copied as-is
    CUSTOM = "custom"  # User keyword, copied with the custom prefix


# Resolve an external value: require(<quoted path>)[.<property>]
#   match group 2 = quoted path, group 4 = optional property name
REGEX_REQUIRE = re.compile(r"""^(\s+)?require\(('@?[a-zA-Z0-9./_-]+'|"@?[a-zA-Z0-9./_-]+")\)(\.([a-zA-Z0-9_$]+))?(\s+|$)""")

# JSON Schema keywords recognized in doc-tags
VALIDATION_KEYWORDS = frozenset(
    {
        "format",
        "enum",
        "type",
        "items",
        "maximum",
        "exclusiveMaximum",
        "minimum",
        "exclusiveMinimum",
        "maxLength",
        "minLength",
        "pattern",
        "examples",
        "maxItems",
        "minItems",
        "uniqueItems",
        "multipleOf",
        "maxProperties",
        "minProperties",
        "additionalProperties",
        "example",
        "ignore",
        "description",
        "default",
        "ref",
        "$ref",
        "title",
        "deprecated",
        "readOnly",
        "writeOnly",
    }
)

# OpenAPI operation keywords recognized in doc-tags
OPERATION_KEYWORDS = frozenset(
    {
        "summary",
        "operationId",
        "tags",
        "contentType",
        "deprecated",
    }
)

# Descriptive keywords permitted alongside a $ref
REF_KEYWORDS = frozenset({"description", "default", "examples", "$ref"})

# Wrapper aliases that only toggle mutability
MUTABILITY_WRAPPERS = frozenset({"Readonly", "ReadOnly", "Mutable", "Final"})

# Marker type emitted for "undefined" members, dropped from output
UNDEFINED_TYPE = "undefined"
