import json

import pytest

from docbundle.cache import LockCache, compute_checksum
from docbundle.errors import LockFileError


def test_checksum_is_md5_hex():
    assert compute_checksum("") == "d41d8cd98f00b204e9800998ecf8427e"
    assert compute_checksum("hello") == "5d41402abc4b2a76b9719d911017c592"


def test_checksum_changes_with_one_character():
    assert compute_checksum("# Intro\n") != compute_checksum("# Intro!\n")


def test_missing_lock_file_loads_empty(tmp_path):
    cache = LockCache(tmp_path / "io-lock.json").load()
    assert len(cache) == 0
    assert cache.get("docs/a/input/x.md") is None


def test_save_writes_flat_mapping(tmp_path):
    lock_file = tmp_path / "io-lock.json"
    cache = LockCache(lock_file).load()
    cache.update("docs/a/input/x.md", "abc")
    cache.update("docs/b/input/y.md", "def")
    cache.save()

    assert json.loads(lock_file.read_text()) == {
        "docs/a/input/x.md": "abc",
        "docs/b/input/y.md": "def",
    }
    assert not (tmp_path / "io-lock.json.tmp").exists()

    reloaded = LockCache(lock_file).load()
    assert reloaded.is_current("docs/a/input/x.md", "abc")
    assert not reloaded.is_current("docs/a/input/x.md", "other")


def test_save_rewrites_whole_file(tmp_path):
    lock_file = tmp_path / "io-lock.json"
    lock_file.write_text(json.dumps({"stale": "1"}))

    cache = LockCache(lock_file).load()
    cache.remove("stale")
    cache.update("fresh", "2")
    cache.save()

    assert json.loads(lock_file.read_text()) == {"fresh": "2"}


def test_invalid_json_raises(tmp_path):
    lock_file = tmp_path / "io-lock.json"
    lock_file.write_text("{not json")

    with pytest.raises(LockFileError):
        LockCache(lock_file).load()


def test_non_object_raises(tmp_path):
    lock_file = tmp_path / "io-lock.json"
    lock_file.write_text("[1, 2]")

    with pytest.raises(LockFileError):
        LockCache(lock_file).load()


def test_remove_prefix(tmp_path):
    cache = LockCache(tmp_path / "io-lock.json")
    cache.update("docs/a/input/x.md", "1")
    cache.update("docs/a/input/sub/y.md", "2")
    cache.update("docs/ab/input/z.md", "3")

    assert cache.remove_prefix("docs/a/input/") == 2
    assert "docs/ab/input/z.md" in cache
    assert len(cache) == 1
