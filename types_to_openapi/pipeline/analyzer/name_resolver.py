"""
Name registry for generated definitions.

Assigns each type a stable name for one generation run. Two different
types never share a name: later ones get a "_1", "_2", ... suffix.
"""

from __future__ import annotations

from ...utils import strip_name_noise
from ..type_graph.nodes import TypeNode


class NameRegistry:
    """Bidirectional mapping between type identities and assigned names."""

    def __init__(self):
        self._names_by_id: dict[int, str] = {}
        self._ids_by_name: dict[str, int] = {}

    def get_type_name(self, node: TypeNode) -> str:
        """Name of a type, assigning one on first use."""
        if node.id in self._names_by_id:
            return self._names_by_id[node.id]
        return self.make_unique(node, strip_name_noise(node.name))

    def make_unique(self, node: TypeNode, base_name: str) -> str:
        name = base_name
        i = 1
        while name in self._ids_by_name and self._ids_by_name[name] != node.id:
            name = f"{base_name}_{i}"
            i += 1
        self._names_by_id[node.id] = name
        self._ids_by_name[name] = node.id
        return name

    def name_of(self, node: TypeNode) -> str | None:
        return self._names_by_id.get(node.id)

    def __contains__(self, name: str) -> bool:
        return name in self._ids_by_name

    def __len__(self) -> int:
        return len(self._ids_by_name)
