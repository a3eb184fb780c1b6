"""Answer one query line of the trie server protocol.

A query is ``COMMAND argument``, the command being case-insensitive.
Booleans are answered with ``TRUE``/``FALSE``, word lists with
comma-separated words and missing words with ``NONE``.
"""

import logging
from collections.abc import Callable
from typing import Optional, Union

from ..container import Container

logger = logging.getLogger(__name__)

Answer = Union[bool, int, list[str], Optional[str]]

COMMANDS: dict[str, Callable[[Container, str], Answer]] = {
    "WORD": Container.is_word,
    "PARTIAL": Container.is_partial_word,
    "SCAN": Container.scan,
    "WITHIN": Container.words_within,
    "HAS_WITHIN": Container.has_words_within,
    "LONGEST_WITHIN": Container.longest_words_within,
    "PREFIX": Container.words_prefix,
    "LONGEST_PREFIX": Container.longest_words_prefix,
    "SIZE": lambda trie, _argument: trie.size(),
}


def format_answer(answer: Answer) -> str:
    """Turn the result of a trie query into a response line."""
    if isinstance(answer, bool):
        return "TRUE" if answer else "FALSE"
    if answer is None:
        return "NONE"
    if isinstance(answer, list):
        return ",".join(answer)
    return str(answer)


def handle_query(trie: Container, query: str) -> str:
    """Run ``query`` against ``trie``.

    Args:
        trie (Container): The trie to query.
        query (str): The query line, without the trailing newline.

    Returns:
        str: The response string.

    """
    command, _, argument = query.partition(" ")
    command = command.strip().upper()

    operation = COMMANDS.get(command)
    if operation is None:
        return f"ERROR: Unknown command '{command}'"

    try:
        return format_answer(operation(trie, argument))
    except Exception as e:
        logger.critical(
            "Query '%s' failed due to unexpected error: %s",
            query,
            e,
            exc_info=True,
        )
        return f"ERROR: Query failed due to an unexpected error: {e}"
