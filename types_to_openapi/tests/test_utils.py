#!/usr/bin/env python3

import pytest

from types_to_openapi.pipeline.analyzer import NameRegistry
from types_to_openapi.pipeline.type_graph import TypeNode
from types_to_openapi.utils import hash_of_declaration, is_reffable_name, strip_name_noise, unique


class TestNaming:
    def test_strip_name_noise(self):
        assert strip_name_noise('"app.models".Book') == "Book"
        assert strip_name_noise('"app.models".Page["app.models".Book]') == "Page[Book]"
        assert strip_name_noise("dict[string, number]") == "dict[string,number]"
        assert strip_name_noise('import("./models").Book') == "Book"

    def test_is_reffable_name(self):
        assert is_reffable_name("Book")
        assert is_reffable_name("Genre.FICTION")
        assert is_reffable_name("Book.1a2b3c4d")
        assert not is_reffable_name("Page[Book]")
        assert not is_reffable_name("string | null")

    def test_unique_keeps_first_seen_order(self):
        assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_hash_of_declaration_is_stable(self):
        first = hash_of_declaration("models/book.py", 12)
        assert first == hash_of_declaration("models/book.py", 12)
        assert first != hash_of_declaration("models/book.py", 13)
        assert len(first) == 8
        int(first, 16)


class TestNameRegistry:
    """Each type gets one name; distinct types never share a name"""

    def test_same_node_same_name(self):
        registry = NameRegistry()
        node = TypeNode(name='"a".Item')
        assert registry.get_type_name(node) == "Item"
        assert registry.get_type_name(node) == "Item"
        assert len(registry) == 1

    def test_collisions_get_suffixes(self):
        registry = NameRegistry()
        first = TypeNode(name='"a".Item')
        second = TypeNode(name='"b".Item')
        third = TypeNode(name='"c".Item')
        assert registry.get_type_name(first) == "Item"
        assert registry.get_type_name(second) == "Item_1"
        assert registry.get_type_name(third) == "Item_2"
        assert registry.get_type_name(second) == "Item_1"
        assert "Item_2" in registry
        assert registry.name_of(third) == "Item_2"

    def test_name_of_unknown_node(self):
        assert NameRegistry().name_of(TypeNode(name="X")) is None


if __name__ == "__main__":
    pytest.main([__file__])
