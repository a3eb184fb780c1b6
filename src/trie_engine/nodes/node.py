"""Shared node contract for raw and compressed trie nodes.

Both variants keep the same fields (label, terminal flag, children and a
parent back-reference) and reuse one traversal algorithm. The only thing a
variant changes is how a single label is consumed while walking the tree,
see ``_consume`` and ``_consume_partially``.
"""

import weakref
from collections import deque
from collections.abc import Iterator, Mapping
from typing import Any, Optional


class InvalidOperationError(Exception):
    """Raised when mutating a trie that can no longer be mutated."""


class Node:
    """Base class of every trie node."""

    compressed = False

    def __init__(
        self,
        label: Optional[str] = None,
        parent: Optional["Node"] = None,
        children_tree: Optional[dict[str, "Node"]] = None,
    ) -> None:
        """Initialize a new node.

        Args:
            label (str, optional): The characters this node stands for.
            ``None`` for the root.
            parent (Node, optional): The node owning this one.
            children_tree (dict, optional): Children keyed by the first
            character of their label.

        """
        self.label = label
        self.terminal = False
        self.children_tree: dict[str, Node] = (
            children_tree if children_tree is not None else {}
        )
        self._parent: Optional[weakref.ref[Node]] = None
        self.parent = parent

    @property
    def parent(self) -> Optional["Node"]:
        """The owning node, or None for the root."""
        if self._parent is None:
            return None
        return self._parent()

    @parent.setter
    def parent(self, node: Optional["Node"]) -> None:
        self._parent = weakref.ref(node) if node is not None else None

    @property
    def children(self) -> list["Node"]:
        return list(self.children_tree.values())

    @property
    def first_letter(self) -> Optional[str]:
        return self.label[0] if self.label else None

    @property
    def is_root(self) -> bool:
        return self.label is None

    @property
    def is_leaf(self) -> bool:
        return not self.children_tree

    def __getitem__(self, label: str) -> "Node":
        """Return the child whose label is exactly ``label``.

        Raises:
            KeyError: If there is no such child.

        """
        child = self.children_tree.get(label[:1])
        if child is None or child.label != label:
            raise KeyError(label)
        return child

    def get(
        self,
        label: str,
        default: Optional["Node"] = None,
    ) -> Optional["Node"]:
        try:
            return self[label]
        except KeyError:
            return default

    def __contains__(self, label: object) -> bool:
        return isinstance(label, str) and self.get(label) is not None

    has_key = __contains__

    # ``add`` and ``_consume`` are left to RawNode and CompressedNode.

    def add(self, chars: str) -> "Node":
        """Add ``chars`` below this node, return the node where they end."""
        raise NotImplementedError(f"{type(self).__name__} cannot add words")

    # Traversal

    def _consume(self, chars: str, index: int) -> Optional["Node"]:
        """Return the child whose whole label starts at ``chars[index]``."""
        raise NotImplementedError(
            f"{type(self).__name__} does not define how labels are consumed",
        )

    def _consume_partially(self, chars: str, index: int) -> Optional["Node"]:
        """Return the child whose label starts with ``chars[index:]``.

        Only used once the remaining input is shorter than the child label.
        """
        return None

    def _walk(self, chars: str) -> tuple[Optional["Node"], int]:
        """Follow whole labels as far as ``chars`` allows.

        Returns:
            tuple: The last node reached and how many characters were
            consumed to reach it.

        """
        node, index = self, 0
        while index < len(chars):
            child = node._consume(chars, index)
            if child is None:
                break
            index += len(child.label or "")
            node = child
        return node, index

    def _closest_node(self, chars: str) -> Optional["Node"]:
        """Return the node whose subtree holds every word starting with
        ``chars``, or None when there is none.
        """
        node, index = self._walk(chars)
        if index == len(chars):
            return node
        # The input may end in the middle of a multi-character label.
        return node._consume_partially(chars, index)

    def is_word(self, chars: str = "") -> bool:
        """Check whether ``chars`` spells a complete word from this node.

        Args:
            chars (str): The characters to follow.

        Returns:
            bool: True only if every character was consumed and the node
            reached is terminal, False otherwise.

        """
        node, index = self._walk(chars)
        return index == len(chars) and node is not None and node.terminal

    def is_partial_word(self, chars: str = "") -> bool:
        """Check whether ``chars`` is a prefix of some path in the trie.

        Args:
            chars (str): The characters to follow.

        Returns:
            bool: True if some position of the tree is reached by consuming
            exactly ``chars``, False otherwise.

        """
        return self._closest_node(chars) is not None

    def scan(self, chars: str = "") -> Iterator[str]:
        """Yield every word in the trie starting with ``chars``."""
        node = self._closest_node(chars)
        if node is None:
            return iter(())
        return iter(node)

    def match_prefix(self, chars: str) -> Iterator[str]:
        """Yield every word that is a prefix of ``chars``, shortest first.

        The walk stops at the first label that does not match the rest of
        the input.
        """
        node, index = self, 0
        while index < len(chars):
            child = node._consume(chars, index)
            if child is None:
                return
            index += len(child.label or "")
            node = child
            if node.terminal:
                yield node.as_word()

    def as_word(self) -> str:
        """Return the word spelled by the path from the root to this node."""
        labels = []
        node: Optional[Node] = self
        while node is not None:
            if node.label:
                labels.append(node.label)
            node = node.parent
        return "".join(reversed(labels))

    # Enumeration

    def _terminal_nodes(self) -> Iterator["Node"]:
        # Pre-order, children in insertion order.
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            if node.terminal:
                yield node
            stack.extend(reversed(node.children_tree.values()))

    def __iter__(self) -> Iterator[str]:
        for node in self._terminal_nodes():
            yield node.as_word()

    def size(self) -> int:
        """Return the number of words stored under this node."""
        return sum(1 for _ in self._terminal_nodes())

    def node_count(self) -> int:
        """Return the number of nodes in this subtree, itself included."""
        count = 0
        stack: list[Node] = [self]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children_tree.values())
        return count

    def to_list(self) -> list[str]:
        return list(self)

    # Equality and representation

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        pairs: list[tuple[Node, Node]] = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if (
                left.label != right.label
                or left.terminal != right.terminal
                or left.children_tree.keys() != right.children_tree.keys()
            ):
                return False
            pairs.extend(
                (child, right.children_tree[key])
                for key, child in left.children_tree.items()
            )
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(label={self.label!r}, "
            f"terminal={self.terminal}, "
            f"children={list(self.children_tree)})"
        )

    def __str__(self) -> str:
        return self.as_word()

    # Wire contract used by the serializers

    def _fields(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "terminal": self.terminal,
            "compressed": self.compressed,
            "children": {},
        }

    def to_dict(self) -> dict[str, Any]:
        """Return this subtree as nested plain dicts and scalars."""
        root_data = self._fields()
        stack: list[tuple[Node, dict[str, Any]]] = [(self, root_data)]
        while stack:
            node, data = stack.pop()
            for key, child in node.children_tree.items():
                child_data = child._fields()
                data["children"][key] = child_data
                stack.append((child, child_data))
        return root_data

    def to_records(self) -> dict[str, Any]:
        """Return this subtree as a flat list of node records.

        Every record is ``[label, terminal, parent_index]``, in breadth-first
        order starting with this node. Nothing is nested, so the result can
        be pickled or written as JSON whatever the length of the words.
        """
        records: list[list[Any]] = [[self.label, self.terminal, None]]
        queue: deque[tuple[Node, int]] = deque([(self, 0)])
        while queue:
            node, index = queue.popleft()
            for child in node.children_tree.values():
                queue.append((child, len(records)))
                records.append([child.label, child.terminal, index])
        return {"compressed": self.compressed, "nodes": records}


def _node_classes() -> tuple[type[Node], type[Node]]:
    # Imported here, both modules import this one.
    from .compressed import CompressedNode
    from .raw import RawNode

    return CompressedNode, RawNode


def _node_from_fields(
    data: Any,
    parent: Optional[Node],
) -> tuple[Node, Mapping[str, Any]]:
    compressed_class, raw_class = _node_classes()
    if not isinstance(data, Mapping):
        raise ValueError(
            f"Malformed node data: expected a mapping, "
            f"got {type(data).__name__}",
        )
    try:
        label = data["label"]
        terminal = bool(data["terminal"])
    except KeyError as e:
        raise ValueError(f"Malformed node data: missing {e!s}") from e
    children = data.get("children", {})
    if not isinstance(children, Mapping):
        raise ValueError(
            f"Malformed node data: children must be a mapping, "
            f"got {type(children).__name__}",
        )

    node_class = compressed_class if data.get("compressed") else raw_class
    node = node_class(label, parent)
    node.terminal = terminal
    return node, children


def node_from_dict(
    data: Mapping[str, Any],
    parent: Optional[Node] = None,
) -> Node:
    """Rebuild a subtree from the output of ``Node.to_dict``.

    Args:
        data (dict): The stored node fields.
        parent (Node, optional): The node the rebuilt subtree hangs from.

    Raises:
        ValueError: If a node is not a mapping, misses a required field or
        has children that are not a mapping.

    Returns:
        Node: A ``CompressedNode`` or ``RawNode`` depending on the stored
        ``compressed`` flag, with parents reassigned.

    """
    root, children = _node_from_fields(data, parent)
    stack = [(root, children)]
    while stack:
        node, children = stack.pop()
        for key, child_data in children.items():
            child, grandchildren = _node_from_fields(child_data, node)
            node.children_tree[key] = child
            stack.append((child, grandchildren))
    return root


def node_from_records(data: Mapping[str, Any]) -> Node:
    """Rebuild a subtree from the output of ``Node.to_records``.

    Raises:
        ValueError: If the records do not describe a tree.

    """
    compressed_class, raw_class = _node_classes()
    try:
        node_class = compressed_class if data.get("compressed") else raw_class
        records = list(data["nodes"])
    except (AttributeError, KeyError, TypeError) as e:
        raise ValueError(f"Malformed trie records: {e!s}") from e
    if not records:
        raise ValueError("Malformed trie records: no root node")

    nodes: list[Node] = []
    for index, record in enumerate(records):
        try:
            label, terminal, parent_index = record
        except (TypeError, ValueError) as e:
            raise ValueError(f"Malformed node record {index}: {e!s}") from e

        if index == 0:
            parent = None
        elif not (
            isinstance(parent_index, int) and 0 <= parent_index < index
        ):
            raise ValueError(
                f"Malformed node record {index}: bad parent {parent_index!r}",
            )
        elif not isinstance(label, str) or not label:
            raise ValueError(
                f"Malformed node record {index}: bad label {label!r}",
            )
        else:
            parent = nodes[parent_index]
            if label[0] in parent.children_tree:
                raise ValueError(
                    f"Malformed node record {index}: duplicate child "
                    f"{label[0]!r}",
                )

        node = node_class(label, parent)
        node.terminal = bool(terminal)
        if parent is not None:
            parent.children_tree[label[0]] = node
        nodes.append(node)
    return nodes[0]
