"""Redundant node elimination for raw tries."""

import logging
import time

from .nodes import CompressedNode, Node

logger = logging.getLogger(__name__)


class Compressor:
    """Build the compressed equivalent of a raw trie.

    Every non-root, non-terminal node with a single child is merged with that
    child, so chains of such nodes collapse into one node with a longer
    label. The input tree is left untouched.
    """

    def compress(self, root: Node) -> Node:
        """Return a compressed copy of the trie hanging from ``root``.

        Args:
            root (Node): The root of the trie to compress.

        Returns:
            Node: The root of a new tree made of ``CompressedNode``, or
            ``root`` itself if it is already compressed.

        """
        if root.compressed:
            return root

        start_time = time.perf_counter()
        compressed_root = CompressedNode(root.label)
        compressed_root.terminal = root.terminal
        stack: list[tuple[Node, CompressedNode]] = [(root, compressed_root)]
        while stack:
            source, target = stack.pop()
            for key, child in source.children_tree.items():
                chain_end, label = self._follow_chain(child)
                compressed_child = CompressedNode(label, parent=target)
                compressed_child.terminal = chain_end.terminal
                target.children_tree[key] = compressed_child
                stack.append((chain_end, compressed_child))

        duration = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "Compressed trie from %d to %d nodes in %.2f ms",
            root.node_count(),
            compressed_root.node_count(),
            duration,
        )
        return compressed_root

    @staticmethod
    def _is_compressible(node: Node) -> bool:
        return (
            not node.is_root
            and not node.terminal
            and len(node.children_tree) == 1
        )

    def _follow_chain(self, node: Node) -> tuple[Node, str]:
        """Walk down from ``node`` through the nodes that fold into their
        only child.

        Returns:
            tuple: The first node that stays a boundary, whose flag and
            children the merged node takes over, and the joined label of
            the whole chain.

        """
        labels = [node.label or ""]
        while self._is_compressible(node):
            node = next(iter(node.children_tree.values()))
            labels.append(node.label or "")
        return node, "".join(labels)
