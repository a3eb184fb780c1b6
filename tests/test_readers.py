from pathlib import Path

import pytest

from trie_engine.readers import PlainTextReader


def test_each_word_reads_one_word_per_line(words_file):
    assert list(PlainTextReader().each_word(words_file)) == [
        "one",
        "word",
        "and",
        "other",
        "words",
    ]


def test_each_word_strips_whitespace_and_skips_blank_lines(tmp_path):
    file_path = tmp_path / "messy.txt"
    file_path.write_text(
        "  hello \n\n\t\nworld\r\n   \nünïcödé\n",
        encoding="utf-8",
    )

    assert list(PlainTextReader().each_word(str(file_path))) == [
        "hello",
        "world",
        "ünïcödé",
    ]


def test_each_word_empty_file(tmp_path):
    empty_file = tmp_path / "empty.txt"
    empty_file.touch()
    assert list(PlainTextReader().each_word(empty_file)) == []


def test_each_word_file_not_found():
    with pytest.raises(FileNotFoundError) as excinfo:
        list(PlainTextReader().each_word(Path("/non/existent/file.txt")))
    assert "File not found" in str(excinfo.value)
