import logging

import pytest

import trie_engine
from trie_engine.logger import teardown_logging

WORDS = ["one", "word", "and", "other", "words"]


@pytest.fixture(autouse=True)
def reset_trie_engine():
    """Restores the module-wide properties and logging after every test."""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    trie_engine.config().reset()
    teardown_logging()
    root_logger.setLevel(level)


@pytest.fixture
def words_file(tmp_path):
    file_path = tmp_path / "words.txt"
    with file_path.open("w", encoding="utf-8") as f:
        for word in WORDS:
            f.write(f"{word}\n")
    return file_path
