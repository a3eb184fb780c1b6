"""Compressed trie node, produced by the compressor.

A compressed node may hold several characters. Lookups always consume whole
labels, except for the final step of a partial match, where the input may end
inside a label.
"""

from typing import Optional

from .node import InvalidOperationError, Node


class CompressedNode(Node):
    """An immutable node holding one or more characters."""

    compressed = True

    def add(self, chars: str) -> Node:
        """Reject insertion, compressed tries are read-only.

        Raises:
            InvalidOperationError: Always.

        """
        raise InvalidOperationError(
            f"Cannot add word '{chars}' to a compressed trie.",
        )

    def _consume(self, chars: str, index: int) -> Optional[Node]:
        child = self.children_tree.get(chars[index])
        if child is not None and chars.startswith(child.label or "", index):
            return child
        return None

    def _consume_partially(self, chars: str, index: int) -> Optional[Node]:
        child = self.children_tree.get(chars[index])
        if child is not None and (child.label or "").startswith(chars[index:]):
            return child
        return None
