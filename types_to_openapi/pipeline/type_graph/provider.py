"""
Type graph provider interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .nodes import TypeGraph


class TypeGraphProvider(ABC):
    """Produces a resolved type graph from some source of declarations."""

    @abstractmethod
    def build(self) -> TypeGraph:
        """
        Resolve all declarations.

        Returns:
            A TypeGraph whose ``symbols`` hold the root declarations and
            whose ``diagnostics`` list every problem found while resolving.
        """
        pass
