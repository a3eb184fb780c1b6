"""Pickle based serializer."""

import pickle

from ..nodes import Node, node_from_records
from .file import Serializer


class PickleSerializer(Serializer):
    """Store the node fields with ``pickle``.

    Only the flat node records are pickled, never the nodes themselves.
    Do not load files coming from untrusted sources.
    """

    def dumps(self, node: Node) -> bytes:
        records = node.to_records()
        return pickle.dumps(records, protocol=pickle.HIGHEST_PROTOCOL)

    def loads(self, data: bytes) -> Node:
        try:
            stored = pickle.loads(data)
        except (pickle.UnpicklingError, EOFError) as e:
            raise ValueError(f"Invalid trie pickle data: {e!s}") from e
        return node_from_records(stored)
