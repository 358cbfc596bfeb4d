"""Lookup of typed declarations inside syntax nodes."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from docletkit.facts import Fact, SyntaxNode

__all__ = ["FactTreeSyntax", "TypeSyntax"]


@runtime_checkable
class TypeSyntax(Protocol):
    """Contract of the type-aware parser consulted by the structural pass."""

    def find(self, node_type: str, node: SyntaxNode) -> Fact | None:
        """Return the first fact of ``node_type`` at or below ``node``."""
        ...

    def type_id(self, text: str, filename: str) -> str:
        """Turn written type text into a documentation type identifier."""
        ...


class FactTreeSyntax:
    """Breadth-first search over :class:`~docletkit.facts.SyntaxNode` trees.

    Nodes are visited in level order; the first node whose attached fact has a
    matching ``node_type`` wins. Export wrappers are followed through their
    ``declaration``.
    """

    def find(self, node_type: str, node: SyntaxNode) -> Fact | None:
        queue: deque[SyntaxNode] = deque([node])
        while queue:
            current = queue.popleft()
            fact = current.fact
            if fact is not None and fact.node_type == node_type:
                return fact
            if current.declaration is not None:
                queue.append(current.declaration)
            queue.extend(current.children)
        return None

    def type_id(self, text: str, filename: str) -> str:  # noqa: ARG002
        return text.strip()
