"""
Per-call generation state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..type_graph.nodes import TypeSymbol
from .name_resolver import NameRegistry

DEFINITIONS_REF_PATH = "#/definitions/"
COMPONENTS_REF_PATH = "#/components/schemas/"


@dataclass
class GenerationContext:
    """State of one generation call.

    A fresh context is created at the start of every call, so independent
    generators never share state.
    """

    ref_path: str = DEFINITIONS_REF_PATH

    names: NameRegistry = field(default_factory=NameRegistry)

    # Name -> full definition of every type promoted to a reference
    reffed_definitions: dict[str, dict[str, Any]] = field(default_factory=dict)

    # Name -> definition currently being built under that name
    recursion_guard: dict[str, dict[str, Any]] = field(default_factory=dict)

    # Properties whose union type contains an "undefined" member
    may_be_absent: set[TypeSymbol] = field(default_factory=set)

    def ref(self, name: str) -> str:
        return self.ref_path + name
