#!/usr/bin/env python3

import copy
import re

import pytest

from types_to_openapi.errors import ApiShapeError
from types_to_openapi.pipeline import GeneratorConfig, create_generator
from types_to_openapi.pipeline.openapi import HTTP_METHODS, is_http_method, is_status_code
from types_to_openapi.tests.test_data import api_shapes, invalid_shapes

GENRE = {"description": "Literary genre.", "type": "string", "enum": ["fiction", "history", "poetry"]}

OPERATIONS = ["GetBook", "CreateBook", "DeleteBook"]


def openapi(type_names=OPERATIONS, spec_data=None, **options):
    return create_generator([api_shapes], GeneratorConfig(**options)).get_openapi_spec(type_names, spec_data)


def collect_refs(value):
    if isinstance(value, dict):
        for k, v in value.items():
            if k == "$ref":
                yield v
            else:
                yield from collect_refs(v)
    elif isinstance(value, list):
        for v in value:
            yield from collect_refs(v)


class TestHttp:
    def test_methods(self):
        assert "GET" in HTTP_METHODS
        assert "CONNECT" not in HTTP_METHODS
        assert is_http_method("patch")
        assert not is_http_method("FETCH")

    def test_status_codes(self):
        assert is_status_code("200")
        assert is_status_code("default")
        assert not is_status_code("299")
        assert not is_status_code("2XX")


class TestOperations:
    """Operations assembled from API shapes"""

    def test_document_skeleton(self):
        spec = openapi()
        assert spec["openapi"] == "3.0.3"
        assert spec["info"] == {"title": "OpenAPI specification", "version": "1.0.0"}
        assert set(spec["paths"]) == {"/books/{id}", "/books"}
        assert set(spec["paths"]["/books/{id}"]) == {"get"}
        assert set(spec["paths"]["/books"]) == {"post"}
        assert spec["components"] == {"schemas": {}}

    def test_get_book(self):
        operation = openapi()["paths"]["/books/{id}"]["get"]
        assert operation["operationId"] == "GetBook"
        assert operation["summary"] == "Get a book"
        assert operation["description"] == "Fetch a single book."
        assert operation["tags"] == ["books", "catalog"]
        assert operation["parameters"] == [
            {
                "name": "id",
                "in": "path",
                "required": True,
                "description": "Identifier of the book.",
                "schema": {"description": "Identifier of the book.", "type": "integer"},
            },
            {
                "name": "fields",
                "in": "query",
                "required": False,
                "description": "Comma-separated list of fields to return.",
                "schema": {"description": "Comma-separated list of fields to return.", "type": "string"},
            },
        ]
        assert operation["security"] == [{"bearer": ["books:read", "books:write"]}]
        assert "requestBody" not in operation

    def test_get_book_responses(self):
        responses = openapi()["paths"]["/books/{id}"]["get"]["responses"]
        assert set(responses) == {"200", "404"}
        assert responses["404"] == {"description": "No such book"}

        ok = responses["200"]
        assert ok["description"] == "The book"
        schema = ok["content"]["*/*"]["schema"]
        assert schema["type"] == "object"
        assert schema["description"] == "A book in the catalog."
        assert schema["properties"]["genre"] == GENRE
        assert schema["required"] == ["cover", "genre", "id", "isbn", "published", "title"]

    def test_create_book(self):
        operation = openapi()["paths"]["/books"]["post"]
        assert operation["operationId"] == "CreateBook"
        assert operation["summary"] == "Create a book"
        assert operation["tags"] == ["books"]
        assert "body" not in operation
        assert "parameters" not in operation
        assert operation["requestBody"] == {
            "description": "The book to add",
            "content": {
                "application/json": {
                    "schema": {
                        "type": "object",
                        "properties": {"title": {"type": "string"}, "genre": GENRE},
                        "required": ["genre", "title"],
                    }
                }
            },
        }
        assert set(operation["responses"]) == {"201", "default"}
        assert operation["responses"]["201"]["description"] == "Created"
        assert operation["responses"]["default"] == {"description": "Unexpected error"}

    def test_custom_properties_are_off_by_default(self):
        operation = openapi()["paths"]["/books"]["post"]
        assert not any(key.startswith("x-") for key in operation)

    def test_custom_operation_properties(self):
        operation = openapi(custom_operation_properties=True)["paths"]["/books"]["post"]
        assert operation["x-audience"] == "internal"
        assert operation["x-stability"] == "beta"

    def test_default_content_type(self):
        responses = openapi(default_content_type="application/json")["paths"]["/books/{id}"]["get"]["responses"]
        assert set(responses["200"]["content"]) == {"application/json"}

    def test_pattern_selects_operations(self):
        spec = openapi([re.compile("^(Get|Create|Delete)Book$")])
        assert set(spec["paths"]) == {"/books/{id}", "/books"}


class TestDocument:
    def test_spec_data_is_kept(self):
        spec_data = {
            "info": {"title": "Library", "version": "2.0.0"},
            "servers": [{"url": "https://example.com"}],
            "paths": {"/health": {"get": {"responses": {"200": {"description": "OK"}}}}},
            "components": {
                "securitySchemes": {"bearer": {"type": "http", "scheme": "bearer"}},
                "schemas": {"Error": {"type": "object"}},
            },
        }
        original = copy.deepcopy(spec_data)
        spec = openapi(spec_data=spec_data)

        assert spec_data == original
        assert spec["info"] == {"title": "Library", "version": "2.0.0"}
        assert spec["servers"] == [{"url": "https://example.com"}]
        assert set(spec["paths"]) == {"/health", "/books/{id}", "/books"}
        assert spec["components"]["securitySchemes"] == {"bearer": {"type": "http", "scheme": "bearer"}}
        assert spec["components"]["schemas"] == {"Error": {"type": "object"}}

    def test_empty_info_gets_default(self):
        assert openapi(spec_data={"info": {}})["info"] == {"title": "OpenAPI specification", "version": "1.0.0"}

    def test_openapi_version(self):
        assert openapi(openapi_version="3.1.0")["openapi"] == "3.1.0"
        assert openapi(spec_data={"openapi": "3.0.0"})["openapi"] == "3.0.0"

    def test_ref_mode(self):
        spec = openapi(ref=True)
        schemas = spec["components"]["schemas"]
        assert "Book" in schemas
        assert schemas["Genre"] == GENRE

        refs = list(collect_refs(spec["paths"]))
        assert refs
        for ref in list(collect_refs(spec)):
            assert ref.startswith("#/components/schemas/")
            assert ref.split("/")[-1] in schemas

        parameters = spec["paths"]["/books/{id}"]["get"]["parameters"]
        assert [(p["name"], p["in"], p["required"]) for p in parameters] == [("id", "path", True), ("fields", "query", False)]

    def test_security_requirement_types_stay_out_of_components(self):
        spec = openapi(ref=True)
        assert "BearerAuth" not in spec["components"]["schemas"]
        assert spec["paths"]["/books/{id}"]["get"]["security"] == [{"bearer": ["books:read", "books:write"]}]

    def test_caller_schemas_win(self):
        spec = openapi(ref=True, spec_data={"components": {"schemas": {"Book": {"type": "string"}}}})
        assert spec["components"]["schemas"]["Book"] == {"type": "string"}

    def test_schema_generation_afterwards_uses_definitions(self):
        generator = create_generator([api_shapes], GeneratorConfig(ref=True))
        generator.get_openapi_spec(OPERATIONS)
        definitions = generator.get_schemas(["NewBook"])["definitions"]
        for ref in collect_refs(definitions):
            assert ref.startswith("#/definitions/")


class TestInvalidShapes:
    @pytest.mark.parametrize(
        "type_name, message",
        [
            ("MissingResponses", "MissingResponses: Missing required field(s): responses"),
            ("IgnoredMissingResponses", "IgnoredMissingResponses: Missing required field(s): responses"),
            ("UnknownMethod", "UnknownMethod: method must be one of"),
            ("PathNotLiteral", "PathNotLiteral: path must be a string literal"),
            ("UnknownStatus", "UnknownStatus: Invalid status code '299' in responses"),
            ("ListParams", "ListParams: params must be an object type"),
        ],
    )
    def test_invalid_shape(self, type_name, message):
        generator = create_generator([invalid_shapes])
        with pytest.raises(ApiShapeError) as e:
            generator.get_openapi_spec([type_name])
        assert str(e.value).startswith(message)
        assert e.value.type_name == type_name


if __name__ == "__main__":
    pytest.main([__file__])
