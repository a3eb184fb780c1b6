"""JSON based serializer."""

import json

from ..nodes import Node, node_from_records
from .file import Serializer


class JsonSerializer(Serializer):
    """Store the node fields as UTF-8 encoded JSON."""

    def dumps(self, node: Node) -> bytes:
        records = node.to_records()
        return json.dumps(records, ensure_ascii=False).encode("utf-8")

    def loads(self, data: bytes) -> Node:
        try:
            return node_from_records(json.loads(data.decode("utf-8")))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid trie JSON data: {e!s}") from e
