#!/usr/bin/env python3

import json
import logging
import os
import re

import pytest

from types_to_openapi.errors import TypeGraphDiagnosticsError, UnsupportedTypeError
from types_to_openapi.pipeline import GeneratorConfig, SchemaGenerator, create_generator
from types_to_openapi.pipeline.type_graph import Diagnostic, TypeGraph
from types_to_openapi.tests.test_data import broken_types, polymorphic_types, schema_types
from types_to_openapi.utils import hash_of_declaration

GENRE = {"description": "Literary genre.", "type": "string", "enum": ["fiction", "history", "poetry"]}

BOOK = {
    "description": "A book in the catalog.",
    "example": {"id": 1, "title": "Dune", "genre": "fiction"},
    "type": "object",
    "properties": {
        "id": {"type": "integer"},
        "title": {"description": "Title as printed on the cover.", "minLength": 1, "type": "string"},
        "genre": GENRE,
        "isbn": {"description": "International Standard Book Number.", "pattern": "^[0-9-]+$", "type": "string"},
        "published": {"type": "string", "format": "date-time"},
        "cover": {"type": "string", "enum": ["ebook", "hardcover", "paperback"]},
        "rating": {"type": "number", "default": 0.5},
        "tags": {"type": "array", "items": {"type": "string"}, "default": []},
    },
    "required": ["cover", "genre", "id", "isbn", "published", "title"],
}


def schemas(type_names, **options):
    return create_generator([schema_types], GeneratorConfig(**options)).get_schemas(type_names)


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


class TestSchemas:
    """Definitions generated from declared types"""

    def test_article(self):
        assert schemas(["Article"]) == {
            "definitions": {
                "Article": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "number"},
                        "title": {"type": "object", "nullable": True},
                        "tags": {"type": "array", "items": {"type": "string"}},
                    },
                    "required": ["id", "tags", "title"],
                }
            }
        }

    def test_article_openapi_31(self):
        title = schemas(["Article"], openapi_version="3.1.0")["definitions"]["Article"]["properties"]["title"]
        assert title == {"anyOf": [{"type": "string"}, {"type": "null"}]}

    def test_book(self):
        assert schemas(["Book"])["definitions"]["Book"] == BOOK

    def test_enums(self):
        definitions = schemas(["Genre", "Priority"])["definitions"]
        assert definitions["Genre"] == GENRE
        assert definitions["Priority"] == {"type": "number", "enum": [1, 2, 3]}

    def test_alias(self):
        assert schemas(["Isbn"])["definitions"]["Isbn"] == {
            "description": "International Standard Book Number.",
            "pattern": "^[0-9-]+$",
            "type": "string",
        }

    def test_measurement(self):
        definition = schemas(["Measurement"])["definitions"]["Measurement"]
        assert definition["description"] == "A measured value."
        assert "unit" not in definition
        assert definition["properties"] == {
            "value": {"minimum": 0, "type": "number"},
            "point": {"type": "array", "items": [{"type": "number"}, {"type": "number"}], "minItems": 2, "maxItems": 2},
            "labels": {"type": "object", "properties": {}, "additionalProperties": {"type": "string"}},
            "extra": {"type": "object", "properties": {}, "additionalProperties": True},
            "payload": {},
            "level": {"type": "number", "enum": [1, 2, 3]},
            "first": {"type": "string", "enum": ["fiction"]},
            "stamp": {"description": "Creation time.", "type": "string"},
        }
        assert definition["required"] == ["extra", "first", "labels", "level", "payload", "point", "stamp", "value"]

    def test_custom_keyword(self):
        definition = schemas(["Measurement"], custom_keywords=["unit"])["definitions"]["Measurement"]
        assert definition["x-unit"] == "cm"

    def test_shelf_drops_methods_and_class_vars(self, caplog):
        with caplog.at_level(logging.WARNING):
            definition = schemas(["Shelf"])["definitions"]["Shelf"]
        assert set(definition["properties"]) == {"label", "genre", "capacity"}
        assert definition["properties"]["capacity"] == {"type": "integer", "default": 20}
        assert "default" not in definition["properties"]["genre"]
        assert definition["required"] == ["label"]
        assert "internal" not in definition
        assert "Cannot read default value of property genre" in caplog.text

    def test_generic_instance(self):
        page = schemas(["Library"])["definitions"]["Library"]["properties"]["page"]
        assert page["type"] == "object"
        assert page["properties"]["items"] == {"type": "array", "items": BOOK}
        assert page["properties"]["total"] == {"type": "integer"}

    def test_unbound_type_parameter_is_unrestricted(self):
        page = schemas(["Page"])["definitions"]["Page"]
        assert page["properties"]["items"] == {"type": "array", "items": {}}

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedTypeError, match="Unsupported type") as e:
            schemas(["Blob"])
        assert e.value.type is not None

    def test_no_type_names(self):
        assert schemas([]) == {}


class TestOptions:
    def test_titles(self):
        definition = schemas(["Article"], titles=True)["definitions"]["Article"]
        assert definition["properties"]["id"]["title"] == "id"

    def test_default_props(self):
        assert schemas(["Article"], default_props=True)["definitions"]["Article"]["defaultProperties"] == []

    def test_ignore_required(self):
        assert "required" not in schemas(["Article"], ignore_required=True)["definitions"]["Article"]

    def test_default_number_type(self):
        definition = schemas(["Article"], default_number_type="integer")["definitions"]["Article"]
        assert definition["properties"]["id"] == {"type": "integer"}

    def test_schema_processor(self):
        definition = schemas(["Article"], schema_processor=lambda d: {**d, "x-checked": True})["definitions"]["Article"]
        assert definition["x-checked"] is True
        assert definition["properties"]["tags"]["x-checked"] is True
        assert definition["properties"]["tags"]["items"]["x-checked"] is True


class TestReferences:
    """Reference mode promotes named types to definitions"""

    def test_titles_are_not_added_to_references(self):
        book = schemas(["Book"], ref=True, titles=True)["definitions"]["Book"]
        assert book["properties"]["genre"] == {"$ref": "#/definitions/Genre"}
        assert book["properties"]["isbn"] == {"$ref": "#/definitions/Isbn"}
        assert book["properties"]["id"] == {"type": "integer", "title": "id"}

    def test_book_references(self):
        definitions = schemas(["Book"], ref=True)["definitions"]
        assert set(definitions) == {"Book", "Genre", "Isbn"}
        assert definitions["Book"]["properties"]["genre"] == {"$ref": "#/definitions/Genre"}
        assert definitions["Book"]["properties"]["isbn"] == {"$ref": "#/definitions/Isbn"}
        assert definitions["Genre"] == GENRE

    def test_every_reference_resolves(self):
        definitions = schemas(["Library"], ref=True)["definitions"]
        refs = list(collect_refs(definitions))
        assert refs
        for ref in refs:
            assert ref.startswith("#/definitions/")
            assert ref[len("#/definitions/") :] in definitions
        assert {"Library", "Book", "Shelf", "Genre", "Isbn"} <= set(definitions)

    def test_generic_instance_is_inlined(self):
        library = schemas(["Library"], ref=True)["definitions"]["Library"]
        assert library["properties"]["page"]["properties"]["items"] == {"type": "array", "items": {"$ref": "#/definitions/Book"}}
        assert library["properties"]["shelves"]["additionalProperties"] == {"$ref": "#/definitions/Shelf"}

    def test_schema_override_survives_resets(self):
        generator = create_generator([schema_types], GeneratorConfig(ref=True))
        generator.set_schema_override("Genre", {"type": "string"})
        for _ in range(2):
            definitions = generator.get_schemas(["Book"])["definitions"]
            assert definitions["Genre"] == {"type": "string"}
            assert definitions["Book"]["properties"]["genre"] == {"$ref": "#/definitions/Genre"}


class TestCycles:
    def test_self_reference(self):
        definitions = schemas(["TreeNode"])["definitions"]
        assert list(definitions) == ["TreeNode"]
        node = definitions["TreeNode"]
        assert node["properties"]["next"] == {"$ref": "#/definitions/TreeNode"}
        assert node["properties"]["value"] == {"type": "string"}
        assert node["required"] == ["value"]

    def test_self_reference_in_ref_mode(self):
        definitions = schemas(["TreeNode"], ref=True)["definitions"]
        assert list(definitions) == ["TreeNode"]
        assert definitions["TreeNode"]["properties"]["next"] == {"$ref": "#/definitions/TreeNode"}


class TestIdempotence:
    @pytest.mark.parametrize("ref", [False, True])
    def test_same_output_twice(self, ref):
        generator = create_generator([schema_types], GeneratorConfig(ref=ref))
        first = json.dumps(generator.get_schemas(["Library", "Measurement", "TreeNode"]))
        second = json.dumps(generator.get_schemas(["Library", "Measurement", "TreeNode"]))
        assert first == second


class TestSymbols:
    def test_filter_type_names(self):
        generator = create_generator([schema_types])
        assert generator.filter_type_names(["Book", "Book", "Missing"]) == ["Book"]
        assert set(generator.filter_type_names([re.compile("^(Book|Genre)$")])) == {"Book", "Genre"}

    def test_get_symbols(self):
        generator = create_generator([schema_types])
        (book,) = generator.get_symbols(["Book"])
        assert book.name == "Book"
        assert book.type_name == "Book"
        assert book.fully_qualified_name == '"types_to_openapi.tests.test_data.schema_types".Book'
        assert len(generator.get_symbols()) == len(generator.symbols)

    def test_unique_names(self):
        working_dir = os.path.dirname(schema_types.__file__)
        generator = create_generator([schema_types], GeneratorConfig(unique_names=True), working_dir=working_dir)
        (book,) = generator.get_symbols([re.compile(r"^Book\.")])
        declaration = book.symbol.declaration
        assert book.type_name == "Book." + hash_of_declaration("schema_types.py", declaration.position)
        definitions = generator.get_schemas([book.type_name])["definitions"]
        assert list(definitions) == [book.type_name]


    def test_unique_names_hash_aliases(self):
        working_dir = os.path.dirname(schema_types.__file__)
        generator = create_generator([schema_types], GeneratorConfig(ref=True, unique_names=True), working_dir=working_dir)
        (book,) = generator.get_symbols([re.compile(r"^Book\.")])
        (isbn,) = generator.get_symbols([re.compile(r"^Isbn\.")])
        definitions = generator.get_schemas([book.type_name])["definitions"]
        assert "Isbn" not in definitions
        assert definitions[book.type_name]["properties"]["isbn"] == {"$ref": "#/definitions/" + isbn.type_name}
        assert definitions[isbn.type_name]["pattern"] == "^[0-9-]+$"
        for ref in collect_refs(definitions):
            assert ref[len("#/definitions/") :] in definitions


class TestPolymorphism:
    def test_abstract_base_is_one_of_subtypes(self):
        definition = create_generator([polymorphic_types]).get_schemas(["Shape"])["definitions"]["Shape"]
        assert definition == {
            "description": "A drawable shape.",
            "oneOf": [
                {
                    "type": "object",
                    "properties": {"name": {"type": "string"}, "radius": {"type": "number"}},
                    "required": ["name", "radius"],
                },
                {
                    "type": "object",
                    "properties": {"name": {"type": "string"}, "side": {"type": "number"}},
                    "required": ["name", "side"],
                },
            ],
        }


class TestDiagnostics:
    def test_diagnostics_raise(self):
        with pytest.raises(TypeGraphDiagnosticsError, match="Fix all errors or run with --ignore-errors") as e:
            create_generator([broken_types])
        assert len(e.value.diagnostics) == 1
        assert "Cannot resolve annotations of Broken" in str(e.value)

    def test_ignore_errors(self):
        generator = create_generator([broken_types], GeneratorConfig(ignore_errors=True))
        assert generator.get_schemas(["Broken"]) == {"definitions": {"Broken": {"type": "object"}}}

    def test_every_diagnostic_is_logged(self, caplog):
        graph = TypeGraph(diagnostics=[Diagnostic("first", "a.py", 1), Diagnostic("second", "b.py", 2)])
        with caplog.at_level(logging.ERROR), pytest.raises(TypeGraphDiagnosticsError):
            SchemaGenerator(graph)
        assert "a.py:1 - first" in caplog.text
        assert "b.py:2 - second" in caplog.text


if __name__ == "__main__":
    pytest.main([__file__])
