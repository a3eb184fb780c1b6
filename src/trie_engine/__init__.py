"""In-memory prefix tree with optional compression.

Typical use::

    import trie_engine

    trie = trie_engine.create("words.txt")
    trie.compress()
    trie.is_word("hello")
    trie_engine.dump(trie, "words.pickle")
"""

import logging
from pathlib import Path
from typing import Any, Union

from .compressor import Compressor
from .config import Properties, ProviderCollection, UnknownProviderError
from .container import Container
from .nodes import CompressedNode, InvalidOperationError, Node, RawNode

__all__ = [
    "CompressedNode",
    "Compressor",
    "Container",
    "InvalidOperationError",
    "Node",
    "Properties",
    "ProviderCollection",
    "RawNode",
    "UnknownProviderError",
    "config",
    "create",
    "dump",
    "load",
]

_logger = logging.getLogger(__name__)

_properties = Properties()


def config() -> Properties:
    """Return the module-wide readers, serializers and builders."""
    return _properties


def create(
    path: Union[str, Path, None] = None,
    reader: Any = None,
) -> Container:
    """Create a new trie.

    Args:
        path (str | Path, optional): A word list to load into the trie.
        reader (optional): Reader for ``path``. Chosen from the file
        extension when not given.

    Returns:
        Container: The new trie.

    """
    container = Container(_properties.root_builder(), _properties.compressor)
    if path is not None:
        reader = reader or _properties.readers.resolve(path)
        for word in reader.each_word(path):
            container.add(word)
        _logger.info(
            "Created trie with %d words from %s",
            container.size(),
            path,
        )
    return container


def load(path: Union[str, Path], serializer: Any = None) -> Container:
    """Load a trie previously written with ``dump``.

    Args:
        path (str | Path): The file to read.
        serializer (optional): Chosen from the file extension when not given.

    Returns:
        Container: The loaded trie.

    """
    serializer = serializer or _properties.serializers.resolve(path)
    root: Node = serializer.load(path)
    _logger.info("Loaded %s trie from %s", _describe(root), path)
    return Container(root, _properties.compressor)


def dump(
    trie: Container,
    path: Union[str, Path],
    serializer: Any = None,
) -> None:
    """Write ``trie`` to ``path``.

    Args:
        trie (Container): The trie to write.
        path (str | Path): The destination file.
        serializer (optional): Chosen from the file extension when not given.

    """
    serializer = serializer or _properties.serializers.resolve(path)
    written = serializer.dump(trie.root, path)
    _logger.info(
        "Dumped %s trie to %s (%s bytes)",
        _describe(trie.root),
        path,
        written,
    )


def _describe(root: Node) -> str:
    return "compressed" if root.compressed else "raw"
