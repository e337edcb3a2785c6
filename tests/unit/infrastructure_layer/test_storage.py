"""
Unit Tests for Key-Value Stores

Tests the directory-backed JSON store and the in-memory store.
"""

import pytest

from code_insight.analysis.result_cache import ResultCache
from code_insight.core.exceptions import PersistenceError
from code_insight.infrastructure.storage import InMemoryStore, JsonFileStore


@pytest.mark.unit
class TestJsonFileStore:
    """Test suite for JsonFileStore."""

    def test_missing_key_returns_none(self, tmp_path):
        store = JsonFileStore(tmp_path)
        assert store.get("aiAnalysisCache") is None

    def test_set_then_get(self, tmp_path):
        store = JsonFileStore(tmp_path / "nested" / "dir")

        store.set("aiAnalysisCache", b'[["file:///a.ts", {}]]')

        assert store.get("aiAnalysisCache") == b'[["file:///a.ts", {}]]'
        assert (tmp_path / "nested" / "dir" / "aiAnalysisCache.json").exists()

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        store = JsonFileStore(tmp_path)

        store.set("key", b"1")
        store.set("key", b"2")

        assert store.get("key") == b"2"
        assert [p.name for p in tmp_path.iterdir()] == ["key.json"]

    def test_unsafe_characters_are_sanitized(self, tmp_path):
        store = JsonFileStore(tmp_path)

        store.set("../escape/key", b"x")

        assert store.get("../escape/key") == b"x"
        assert all(p.parent == tmp_path for p in tmp_path.iterdir())

    def test_unwritable_directory_raises_persistence_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = JsonFileStore(blocker)

        with pytest.raises(PersistenceError) as exc_info:
            store.set("key", b"x")

        assert "key" in exc_info.value.message

    def test_result_cache_survives_restart(self, tmp_path):
        cache = ResultCache(JsonFileStore(tmp_path))
        cache.start_new("file:///a.ts")
        cache.record_chunk("file:///a.ts", "summary", "Hello")
        cache.persist()

        restored = ResultCache(JsonFileStore(tmp_path))

        assert restored.load() == 1
        assert restored.get("file:///a.ts").data == {"summary": "Hello"}


@pytest.mark.unit
class TestInMemoryStore:
    """Test suite for InMemoryStore."""

    def test_initial_values(self):
        store = InMemoryStore({"a": b"1"})
        assert store.get("a") == b"1"
        assert store.get("b") is None

    def test_set_and_keys(self):
        store = InMemoryStore()

        store.set("a", b"1")
        store.set("b", bytearray(b"2"))

        assert store.keys() == ["a", "b"]
        assert store.get("b") == b"2"
