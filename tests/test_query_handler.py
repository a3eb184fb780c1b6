from unittest.mock import MagicMock, patch

import pytest

from trie_engine.container import Container
from trie_engine.server.query_handler import format_answer, handle_query

PHRASE_WORDS = ["one", "word", "and", "other", "words"]


@pytest.fixture(params=[False, True], ids=["raw", "compressed"])
def trie(request):
    container = Container()
    container.update(PHRASE_WORDS)
    if request.param:
        container.compress()
    return container


# Test the answer formatting
@pytest.mark.parametrize(
    "answer, expected",
    [
        (True, "TRUE"),
        (False, "FALSE"),
        (None, "NONE"),
        (["word", "words"], "word,words"),
        ([], ""),
        ("word", "word"),
        (5, "5"),
    ],
)
def test_format_answer(answer, expected):
    assert format_answer(answer) == expected


# Test the commands
@pytest.mark.parametrize(
    "query, expected",
    [
        ("WORD word", "TRUE"),
        ("WORD wor", "FALSE"),
        ("PARTIAL wor", "TRUE"),
        ("PARTIAL xyz", "FALSE"),
        ("SCAN wor", "word,words"),
        ("SCAN xyz", ""),
        ("WITHIN xyzword", "word"),
        ("HAS_WITHIN xyz", "FALSE"),
        ("HAS_WITHIN xyzand", "TRUE"),
        ("LONGEST_WITHIN words", "words"),
        ("LONGEST_WITHIN oneand", "one,and"),
        ("PREFIX oneabc", "one"),
        ("PREFIX wordsmith", "word,words"),
        ("LONGEST_PREFIX wordsmith", "words"),
        ("LONGEST_PREFIX xyz", "NONE"),
        ("SIZE", "5"),
    ],
)
def test_handle_query(trie, query, expected):
    assert handle_query(trie, query) == expected


def test_command_is_case_insensitive(trie):
    assert handle_query(trie, "word word") == "TRUE"
    assert handle_query(trie, "Longest_Prefix wordsmith") == "words"


def test_argument_keeps_its_spaces(trie):
    assert handle_query(trie, "WITHIN xyz word other") == "word,other"


def test_unknown_command(trie):
    assert handle_query(trie, "FOO bar") == "ERROR: Unknown command 'FOO'"
    assert handle_query(trie, "") == "ERROR: Unknown command ''"


def test_unexpected_error_is_reported():
    root = MagicMock()
    root.is_word.side_effect = RuntimeError("boom")

    with patch("trie_engine.server.query_handler.logger") as mock_logger:
        response = handle_query(Container(root), "WORD word")

    assert response == "ERROR: Query failed due to an unexpected error: boom"
    mock_logger.critical.assert_called_once()
