"""
OpenAPI document assembler.

Interprets "API shape" types into OpenAPI operations. A shape declares:

    path        string literal, the path template
    method      string literal, the HTTP method
    params      (optional) object type, path parameters
    query       (optional) object type, query parameters
    body        (optional) object type, request body
    responses   object type keyed by status code
    security    (optional) array of security requirement objects

Annotations on the shape become operation fields (summary, tags, ...);
``body.*`` annotations go to the request body.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from ...constants import MUTABILITY_WRAPPERS
from ...errors import ApiShapeError
from ..analyzer.context import COMPONENTS_REF_PATH, GenerationContext
from ..analyzer.enums import extract_literal_value
from ..analyzer.schema_generator import SchemaGenerator, TypeNamePattern
from ..type_graph.nodes import TypeFlags, TypeNode, TypeSymbol
from .http import HTTP_METHODS, is_http_method, is_status_code

logger = logging.getLogger(__name__)

DEFAULT_INFO = {"title": "OpenAPI specification", "version": "1.0.0"}

SHAPE_FIELDS = ("path", "method", "params", "query", "body", "responses", "security")
REQUIRED_SHAPE_FIELDS = ("path", "method", "responses")


def _unwrap(node: TypeNode) -> TypeNode:
    while node.alias_symbol is not None and node.alias_symbol.name in MUTABILITY_WRAPPERS and node.alias_arguments:
        node = node.alias_arguments[0]
    return node


def _is_plain_object(node: TypeNode) -> bool:
    if node.is_intersection():
        return all(_is_plain_object(member) for member in node.types)
    return node.flags == TypeFlags.OBJECT and node.number_index is None and not node.element_types


def _is_empty(node: TypeNode) -> bool:
    if node.flags in (TypeFlags.UNDEFINED, TypeFlags.UNKNOWN, TypeFlags.NULL):
        return True
    return (
        node.flags == TypeFlags.OBJECT
        and not node.get_properties()
        and node.string_index is None
        and node.number_index is None
        and not node.element_types
    )


class OpenApiGenerator(SchemaGenerator):
    """Generates OpenAPI documents from API shape types."""

    def get_openapi_spec(self, type_names: list[TypeNamePattern], spec_data: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Assemble an OpenAPI document.

        Args:
            type_names: Names or compiled patterns of API shape types
            spec_data: Document fields to start from (info, tags, servers,
                security, components, ...)

        Returns:
            The OpenAPI document

        Raises:
            ApiShapeError: If a shape does not follow the operation contract
        """
        spec_data = copy.deepcopy(spec_data) if spec_data else {}
        names = self.filter_type_names(type_names)

        self.reset_schema_specific_properties(COMPONENTS_REF_PATH)

        if not spec_data.get("info"):
            spec_data["info"] = dict(DEFAULT_INFO)

        components = spec_data.pop("components", None) or {}
        caller_schemas = components.pop("schemas", None) or {}
        paths = spec_data.pop("paths", None) or {}

        spec: dict[str, Any] = {
            "openapi": self.config.openapi_version,
            **spec_data,
            "components": {**components, "schemas": {}},
            "paths": paths,
        }

        for type_name in names:
            assembled = self._build_operation(type_name, self.symbols[type_name])
            if assembled is None:
                continue
            path, method, operation = assembled
            spec["paths"].setdefault(path, {})[method] = operation
            logger.debug("Assembled %s %s from %s", method.upper(), path, type_name)

        spec["components"]["schemas"] = {**self.context.reffed_definitions, **caller_schemas}
        return spec

    def _build_operation(self, type_name: str, node: TypeNode) -> tuple[str, str, dict[str, Any]] | None:
        node = _unwrap(node)
        shape_symbol = node.alias_symbol or node.symbol
        shape = {name: node.get_property(name) for name in SHAPE_FIELDS}
        missing = [name for name in REQUIRED_SHAPE_FIELDS if shape[name] is None]
        if missing:
            raise ApiShapeError(f"Missing required field(s): {', '.join(missing)}", type_name)

        comments, others = self.annotations.parse_annotations(shape_symbol)
        if "ignore" in comments or "ignore" in others:
            logger.debug("Skipping ignored operation %s", type_name)
            return None

        operation: dict[str, Any] = {"operationId": shape_symbol.name if shape_symbol is not None else type_name}

        tags = comments.pop("tags", None)
        if isinstance(tags, str):
            operation["tags"] = [tag.strip() for tag in tags.split(",")]
        elif isinstance(tags, list):
            operation["tags"] = tags
        body_annotations = comments.pop("body", None)
        for key, value in comments.items():
            operation[key] = value

        if self.config.custom_operation_properties:
            self._add_custom_properties(node, others, operation)

        parameters = []
        if shape["params"] is not None:
            parameters.extend(self._build_parameters(type_name, shape["params"], "path"))
        if shape["query"] is not None:
            parameters.extend(self._build_parameters(type_name, shape["query"], "query"))
        if parameters:
            operation["parameters"] = parameters

        if shape["body"] is not None:
            request_body = self._build_request_body(type_name, shape["body"], body_annotations if isinstance(body_annotations, dict) else {})
            if request_body is not None:
                operation["requestBody"] = request_body

        operation["responses"] = self._build_responses(type_name, shape["responses"])

        if shape["security"] is not None:
            operation["security"] = self._build_security(type_name, shape["security"])

        path = self._literal_string(type_name, shape["path"], "path")
        method = self._literal_string(type_name, shape["method"], "method")
        if not is_http_method(method):
            raise ApiShapeError(f"method must be one of {', '.join(HTTP_METHODS)}, got {method!r}", type_name)
        return path, method.lower(), operation

    def _add_custom_properties(self, node: TypeNode, others: dict[str, Any], operation: dict[str, Any]) -> None:
        prefix = self.config.custom_keyword_prefix
        for name, value in others.items():
            operation[prefix + name] = value
        for prop in node.get_properties():
            if prop.name in SHAPE_FIELDS or prop.type is None:
                continue
            value = extract_literal_value(_unwrap(prop.type))
            if value is None:
                logger.warning("Ignoring operation property %s: only literal values are supported", prop.name)
                continue
            operation[prefix + prop.name] = value

    @staticmethod
    def _literal_string(type_name: str, prop: TypeSymbol, field_name: str) -> str:
        node = _unwrap(prop.type) if prop.type is not None else None
        if node is None or not node.has_flag(TypeFlags.STRING_LITERAL):
            raise ApiShapeError(f"{field_name} must be a string literal", type_name)
        return str(node.value)

    def _object_schema(self, schema: dict[str, Any]) -> dict[str, Any]:
        """Follow references and flatten allOf to reach the properties of an object schema."""
        if "$ref" in schema:
            name = schema["$ref"].rsplit("/", 1)[-1]
            return self._object_schema(self.context.reffed_definitions.get(name, {}))
        if "allOf" in schema:
            merged: dict[str, Any] = {"type": "object", "properties": {}, "required": []}
            for sub in schema["allOf"]:
                sub = self._object_schema(sub)
                merged["properties"].update(sub.get("properties", {}))
                merged["required"].extend(sub.get("required", []))
            return merged
        return schema

    def _build_parameters(self, type_name: str, prop: TypeSymbol, location: str) -> list[dict[str, Any]]:
        node = _unwrap(prop.type)
        if _is_empty(node):
            return []
        if not _is_plain_object(node):
            raise ApiShapeError(f"{prop.name} must be an object type", type_name)

        schema = self._object_schema(self.build_definition(node, self.config.ref, reffed=node.symbol))
        required = schema.get("required", [])

        parameters = []
        for name, property_schema in schema.get("properties", {}).items():
            parameter: dict[str, Any] = {"name": name, "in": location, "required": name in required}
            if isinstance(property_schema, dict) and property_schema.get("description"):
                parameter["description"] = property_schema["description"]
            parameter["schema"] = property_schema
            parameters.append(parameter)
        return parameters

    def _build_request_body(self, type_name: str, prop: TypeSymbol, annotations: dict[str, Any]) -> dict[str, Any] | None:
        node = _unwrap(prop.type)
        if _is_empty(node):
            return None
        if not _is_plain_object(node):
            raise ApiShapeError("body must be an object type", type_name)

        schema = self.build_definition(node, self.config.ref, reffed=node.symbol)
        annotations = dict(annotations)
        content_type = annotations.pop("contentType", None) or self.config.default_content_type
        return {**annotations, "content": {content_type: {"schema": schema}}}

    def _build_responses(self, type_name: str, prop: TypeSymbol) -> dict[str, Any]:
        node = _unwrap(prop.type)
        if not _is_plain_object(node) or not node.get_properties():
            raise ApiShapeError("responses must be an object type keyed by status code", type_name)

        responses: dict[str, Any] = {}
        for response_symbol in node.get_properties():
            status = response_symbol.name
            if not is_status_code(status):
                raise ApiShapeError(f"Invalid status code {status!r} in responses", type_name)

            response_type = _unwrap(response_symbol.type)
            no_body = response_type.flags == TypeFlags.NEVER
            if not no_body and not _is_plain_object(response_type):
                raise ApiShapeError(f"Response {status} must be an object type", type_name)

            comments, _ = self.annotations.parse_annotations(response_symbol)
            content_type = comments.pop("contentType", None) or self.config.default_content_type
            response = dict(comments)
            response.setdefault("description", "")
            if not no_body:
                schema = self.build_definition(response_type, self.config.ref, reffed=response_type.alias_symbol)
                response["content"] = {content_type: {"schema": schema}}
            responses[status] = response
        return responses

    def _build_security(self, type_name: str, prop: TypeSymbol) -> list[dict[str, list[str]]]:
        # Requirement types are only read here, never referenced from the document
        context = self.context
        self.context = GenerationContext(ref_path=context.ref_path, reffed_definitions=dict(self.schema_overrides))
        try:
            return self._security_requirements(type_name, _unwrap(prop.type))
        finally:
            self.context = context

    def _security_requirements(self, type_name: str, node: TypeNode) -> list[dict[str, list[str]]]:
        schema = self._object_schema(self.build_definition(node, False))
        if schema.get("type") != "array":
            raise ApiShapeError("security must be an array of security requirement objects", type_name)

        items = schema.get("items", [])
        requirements = []
        for item in items if isinstance(items, list) else [items]:
            item = self._object_schema(item)
            if item.get("type") != "object":
                raise ApiShapeError("security must be an array of security requirement objects", type_name)
            requirement: dict[str, list[str]] = {}
            for name, scheme_schema in item.get("properties", {}).items():
                scopes = self._object_schema(scheme_schema).get("items", {})
                scopes = scopes if isinstance(scopes, dict) else {}
                requirement[name] = [v for v in self._object_schema(scopes).get("enum", []) if isinstance(v, str)]
            requirements.append(requirement)
        return requirements
