"""Uncompressed trie node, one character per node."""

from typing import Optional

from .node import Node


class RawNode(Node):
    """A mutable node holding a single character."""

    def add(self, chars: str) -> Node:
        """Insert ``chars`` below this node.

        Args:
            chars (str): The word, or the rest of it, to insert.

        Returns:
            Node: The node where the word ends, marked as terminal.

        """
        node: Node = self
        for char in chars:
            # If the character is not already a child, add a new node
            child = node.children_tree.get(char)
            if child is None:
                child = RawNode(char, node)
                node.children_tree[char] = child
            node = child
        node.terminal = True
        return node

    def _consume(self, chars: str, index: int) -> Optional[Node]:
        return self.children_tree.get(chars[index])
