"""Common file handling for the node serializers."""

from pathlib import Path
from typing import Union

from ..nodes import Node


class Serializer:
    """Base class for serializers.

    Subclasses turn a node into bytes and back through ``dumps`` and
    ``loads``; this class takes care of reading and writing files. It is
    never used on its own.
    """

    def dumps(self, node: Node) -> bytes:
        """Return ``node`` as bytes, implemented by every subclass."""
        raise NotImplementedError(f"{type(self).__name__} cannot dump nodes")

    def loads(self, data: bytes) -> Node:
        """Rebuild a node from bytes, implemented by every subclass."""
        raise NotImplementedError(f"{type(self).__name__} cannot load nodes")

    def dump(self, node: Node, path: Union[str, Path]) -> int:
        """Write ``node`` to the file at ``path``.

        Returns:
            int: The number of bytes written.

        """
        return Path(path).write_bytes(self.dumps(node))

    def load(self, path: Union[str, Path]) -> Node:
        """Read a node back from the file at ``path``.

        Raises:
            FileNotFoundError: If the file does not exist.

        """
        data_path = Path(path)
        if not data_path.exists():
            raise FileNotFoundError(f"File not found: {data_path}")
        return self.loads(data_path.read_bytes())
