"""The public face of a trie: insertion, compression and every search."""

import logging
from collections.abc import Iterable, Iterator
from typing import Optional

from .compressor import Compressor
from .nodes import Node, RawNode

logger = logging.getLogger(__name__)


class Container:
    """Wrapper on top of the trie data structure.

    All queries go through the current root, so they behave the same before
    and after ``compress``.
    """

    def __init__(
        self,
        root: Optional[Node] = None,
        compressor: Optional[Compressor] = None,
    ) -> None:
        """Initialize the container.

        Args:
            root (Node, optional): The root node of the trie. A new empty
            ``RawNode`` is used when not given.
            compressor (Compressor, optional): Used by ``compress``.

        """
        self._root = root if root is not None else RawNode()
        self._compressor = (
            compressor if compressor is not None else Compressor()
        )

    @property
    def root(self) -> Node:
        return self._root

    # Mutation

    def add(self, word: str) -> Node:
        """Add a word to the trie.

        Args:
            word (str): The word to add. Empty words are ignored.

        Raises:
            InvalidOperationError: If the trie is already compressed.

        Returns:
            Node: The node where the word ends, or the root for an empty word.

        """
        if not word:
            return self._root
        return self._root.add(word)

    push = add

    def update(self, words: Iterable[str]) -> None:
        """Add every word of ``words`` to the trie."""
        for word in words:
            self.add(word)

    def compress(self) -> "Container":
        """Replace the root by its compressed version.

        Only compresses tries that have not been compressed yet.

        Returns:
            Container: This container.

        """
        if not self._root.compressed:
            self._root = self._compressor.compress(self._root)
            logger.info("Trie compressed, %d words", self.size())
        return self

    # Queries

    def is_word(self, word: str = "") -> bool:
        """Check whether ``word`` was added as a whole word."""
        return self._root.is_word(word)

    def is_partial_word(self, word: str = "") -> bool:
        """Check whether ``word`` is a word or the start of one."""
        return self._root.is_partial_word(word)

    match = is_partial_word

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and self.is_word(word)

    def scan(self, prefix: str = "") -> list[str]:
        """Return all the words starting with ``prefix``.

        Args:
            prefix (str): The leading characters. Every word is returned
            for an empty prefix.

        Returns:
            list[str]: The matching words, in depth-first order.

        """
        return list(self._root.scan(prefix))

    words = scan

    def words_within(self, phrase: str) -> list[str]:
        """Return every word found anywhere in ``phrase``.

        Matches may overlap, "one" and "on" are both reported for "one"
        when both are words.
        """
        return list(self._words_within(phrase))

    def has_words_within(self, phrase: str) -> bool:
        """Check whether any word is found in ``phrase``.

        Stops at the first match.
        """
        return any(True for _ in self._words_within(phrase))

    def longest_words_within(self, phrase: str) -> list[str]:
        """Return the longest words found in ``phrase`` without overlaps.

        Scanning goes left to right. At each position the longest word
        starting there is taken and the scan jumps past it; if no word
        starts there, the scan moves one character forward.
        """
        return list(self._longest_words_within(phrase))

    def words_prefix(self, phrase: str) -> list[str]:
        """Return every word that is a prefix of ``phrase``, shortest first."""
        return list(self._root.match_prefix(phrase))

    def longest_words_prefix(self, phrase: str) -> Optional[str]:
        """Return the longest word that is a prefix of ``phrase``.

        Returns:
            str: The word, or None if no word starts ``phrase``.

        """
        return self._longest(self._root.match_prefix(phrase))

    def _words_within(self, phrase: str) -> Iterator[str]:
        for start in range(len(phrase)):
            yield from self._root.match_prefix(phrase[start:])

    def _longest_words_within(self, phrase: str) -> Iterator[str]:
        start = 0
        while start < len(phrase):
            longest_word = self._longest(
                self._root.match_prefix(phrase[start:]),
            )
            if longest_word is None:
                start += 1
            else:
                yield longest_word
                start += len(longest_word)

    @staticmethod
    def _longest(words: Iterable[str]) -> Optional[str]:
        # The first word found wins ties.
        longest_word = None
        for word in words:
            if longest_word is None or len(word) > len(longest_word):
                longest_word = word
        return longest_word

    # Delegates to the root node

    def __getitem__(self, label: str) -> Node:
        return self._root[label]

    def get(
        self,
        label: str,
        default: Optional[Node] = None,
    ) -> Optional[Node]:
        return self._root.get(label, default)

    def has_key(self, label: str) -> bool:
        return label in self._root

    @property
    def children(self) -> list[Node]:
        return self._root.children

    @property
    def children_tree(self) -> dict[str, Node]:
        return self._root.children_tree

    @property
    def compressed(self) -> bool:
        return self._root.compressed

    @property
    def label(self) -> Optional[str]:
        return self._root.label

    @property
    def parent(self) -> Optional[Node]:
        return self._root.parent

    def as_word(self) -> str:
        return self._root.as_word()

    def size(self) -> int:
        """Return the number of words in the trie."""
        return self._root.size()

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[str]:
        return iter(self._root)

    def to_list(self) -> list[str]:
        return self._root.to_list()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Container):
            return NotImplemented
        return self._root == other.root

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Container(root={self._root!r}, compressed={self.compressed})"
