"""Zip archive wrapper around the other serializers."""

import io
import zipfile
from pathlib import Path
from typing import TYPE_CHECKING, Any, Union

from ..nodes import Node
from .file import Serializer

if TYPE_CHECKING:
    from ..config import Properties


class ZipSerializer(Serializer):
    """Store a node inside a zip archive.

    The archive holds a single entry named after the destination path
    without its ``.zip`` suffix, so ``trie.json.zip`` contains ``trie.json``.
    The entry's extension picks the serializer used inside the archive.
    """

    def __init__(self, properties: "Properties") -> None:
        """Initialize the serializer.

        Args:
            properties (Properties): Provides the serializers used for the
            archive entries.

        """
        self.properties = properties

    def _inner_serializer(self, entry_name: str) -> Any:
        serializer = self.properties.serializers.resolve(entry_name)
        if isinstance(serializer, ZipSerializer):
            raise ValueError(
                f"Nested zip archives are not supported: {entry_name}",
            )
        return serializer

    @staticmethod
    def _entry_name(path: Union[str, Path]) -> str:
        name = Path(path).name
        return name[: -len(".zip")] if name.endswith(".zip") else name

    def dump(self, node: Node, path: Union[str, Path]) -> int:
        data = self._archive(node, self._entry_name(path))
        return Path(path).write_bytes(data)

    def dumps(self, node: Node) -> bytes:
        default = self.properties.serializers.default
        if default is None or isinstance(default, ZipSerializer):
            raise ValueError("No default serializer for the archive entry.")
        extension = self.properties.serializers.extension_of(default)
        return self._archive(node, f"trie.{extension}")

    def _archive(self, node: Node, entry_name: str) -> bytes:
        data = self._inner_serializer(entry_name).dumps(node)
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            archive.writestr(entry_name, data)
        return buffer.getvalue()

    def loads(self, data: bytes) -> Node:
        """Rebuild the node stored in the first entry of the archive.

        Raises:
            ValueError: If the data is not a zip archive or is empty.

        """
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                names = archive.namelist()
                if not names:
                    raise ValueError("Empty zip archive.")
                entry_data = archive.read(names[0])
        except zipfile.BadZipFile as e:
            raise ValueError(f"Invalid zip archive: {e!s}") from e
        return self._inner_serializer(names[0]).loads(entry_data)
