import io
import pickle
import zipfile
from pathlib import Path

import pytest

import trie_engine
from trie_engine.compressor import Compressor
from trie_engine.nodes import RawNode
from trie_engine.serializers import (
    JsonSerializer,
    PickleSerializer,
    Serializer,
    ZipSerializer,
)

WORDS = ["repay", "rest", "repaint", "you", "your", "yours", "ünïcödé"]


def build_root(compress):
    root = RawNode()
    for word in WORDS:
        root.add(word)
    return Compressor().compress(root) if compress else root


@pytest.fixture(params=[False, True], ids=["raw", "compressed"])
def root(request):
    return build_root(request.param)


SERIALIZERS = [
    (PickleSerializer, "trie.pickle"),
    (JsonSerializer, "trie.json"),
    (lambda: ZipSerializer(trie_engine.config()), "trie.json.zip"),
    (lambda: ZipSerializer(trie_engine.config()), "trie.pickle.zip"),
    (lambda: ZipSerializer(trie_engine.config()), "trie.zip"),
]


# Test the file round trips
@pytest.mark.parametrize("make_serializer, file_name", SERIALIZERS)
def test_dump_then_load_rebuilds_the_root(
    tmp_path,
    root,
    make_serializer,
    file_name,
):
    serializer = make_serializer()
    path = tmp_path / file_name

    written = serializer.dump(root, path)
    loaded = serializer.load(path)

    assert written == path.stat().st_size
    assert loaded == root
    assert loaded.compressed is root.compressed
    assert list(loaded.scan("")) == list(root.scan(""))
    for word in WORDS:
        assert loaded.is_word(word) is True


@pytest.mark.parametrize("make_serializer, file_name", SERIALIZERS)
def test_load_missing_file(tmp_path, make_serializer, file_name):
    with pytest.raises(FileNotFoundError):
        make_serializer().load(tmp_path / file_name)


def test_loaded_compressed_root_stays_read_only(tmp_path):
    serializer = JsonSerializer()
    path = tmp_path / "trie.json"
    serializer.dump(build_root(True), path)

    loaded = serializer.load(path)
    with pytest.raises(trie_engine.InvalidOperationError):
        loaded.add("word")


def test_loaded_raw_root_can_still_grow(tmp_path):
    serializer = PickleSerializer()
    path = tmp_path / "trie.pickle"
    serializer.dump(build_root(False), path)

    loaded = serializer.load(path)
    assert loaded.add("repair").as_word() == "repair"
    assert loaded.is_word("repair") is True


# Test the in-memory encodings
def test_json_is_readable(root):
    data = JsonSerializer().dumps(root).decode("utf-8")
    assert "[null, false, null]" in data
    assert '"ü' in data


def test_json_invalid_data():
    with pytest.raises(ValueError):
        JsonSerializer().loads(b"not json")


def test_pickle_stores_plain_data(root):
    data = PickleSerializer().dumps(root)
    assert b"RawNode" not in data
    assert b"CompressedNode" not in data


# Test the zip archive layout
def test_zip_entry_is_named_after_the_file(tmp_path, root):
    path = tmp_path / "words.json.zip"
    ZipSerializer(trie_engine.config()).dump(root, path)

    with zipfile.ZipFile(path) as archive:
        assert archive.namelist() == ["words.json"]
        assert JsonSerializer().loads(archive.read("words.json")) == root


def test_zip_dumps_uses_the_default_serializer(root):
    data = ZipSerializer(trie_engine.config()).dumps(root)

    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        assert archive.namelist() == ["trie.pickle"]


def test_zip_invalid_data():
    with pytest.raises(ValueError):
        ZipSerializer(trie_engine.config()).loads(b"not a zip")


def test_zip_empty_archive():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w"):
        pass
    with pytest.raises(ValueError):
        ZipSerializer(trie_engine.config()).loads(buffer.getvalue())


def test_zip_nested_archive_is_rejected(tmp_path, root):
    with pytest.raises(ValueError):
        ZipSerializer(trie_engine.config()).dump(
            root,
            Path(tmp_path / "trie.zip.zip"),
        )


def test_pickle_invalid_data():
    with pytest.raises(ValueError):
        PickleSerializer().loads(b"not a pickle")


@pytest.mark.parametrize(
    "stored",
    [
        ["not", "a", "mapping"],
        {"compressed": False, "nodes": "abc"},
        {"compressed": False, "nodes": [[None, False, None], ["a", 1, "0"]]},
    ],
)
def test_pickle_malformed_records(stored):
    with pytest.raises(ValueError):
        PickleSerializer().loads(pickle.dumps(stored))


# Test words far longer than the interpreter's recursion limit
@pytest.mark.parametrize("make_serializer, file_name", SERIALIZERS)
@pytest.mark.parametrize("compress", [False, True], ids=["raw", "compressed"])
def test_dump_then_load_long_words(
    tmp_path,
    make_serializer,
    file_name,
    compress,
):
    long_word = "ab" * 2500
    root = RawNode()
    root.add(long_word)
    root.add(long_word + "c")
    if compress:
        root = Compressor().compress(root)
    serializer = make_serializer()
    path = tmp_path / file_name

    serializer.dump(root, path)
    loaded = serializer.load(path)

    assert loaded == root
    assert loaded.is_word(long_word + "c") is True


def test_base_serializer_leaves_the_encoding_to_subclasses(tmp_path):
    with pytest.raises(NotImplementedError):
        Serializer().dump(RawNode(), tmp_path / "trie.bin")
    with pytest.raises(NotImplementedError):
        Serializer().loads(b"")
