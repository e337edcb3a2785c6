"""
Unit Tests for ResultCache

Tests per-tab accumulation, status transitions, staleness and the
persisted round trip.
"""

import orjson
import pytest

from code_insight.analysis.models import AnalysisResult
from code_insight.analysis.result_cache import ResultCache, deserialize_entries, serialize_entries
from code_insight.core.config.constants import STORE_KEY_RESULT_CACHE, TabStatus
from code_insight.core.exceptions import PersistenceError
from code_insight.infrastructure.storage.memory_store import InMemoryStore

A, B = "file:///a.ts", "file:///b.ts"


class FailingStore:
    def get(self, key):
        raise PersistenceError("disk gone")

    def set(self, key, value):
        raise PersistenceError("disk gone")


@pytest.fixture
def cache():
    return ResultCache(InMemoryStore())


@pytest.mark.unit
class TestMutation:
    def test_start_new_replaces_entry(self, cache):
        cache.begin_tab(A, "summary")
        cache.record_chunk(A, "summary", "old")

        fresh = cache.start_new(A)

        assert cache.get(A) is fresh
        assert fresh.data == {} and fresh.status == {} and fresh.is_stale is False

    def test_record_chunk_concatenates_in_order(self, cache):
        cache.start_new(A)
        fragments = ["He", "l", "", "lo", " wor", "ld"]

        texts = [cache.record_chunk(A, "summary", fragment) for fragment in fragments]

        assert texts[-1] == "".join(fragments)
        assert cache.get(A).data["summary"] == "Hello world"
        assert cache.get(A).status["summary"] is TabStatus.GENERATING

    def test_record_chunk_on_missing_entry_is_noop(self, cache):
        assert cache.record_chunk(A, "summary", "x") is None
        assert A not in cache

    def test_begin_tab_clears_text(self, cache):
        cache.begin_tab(A, "summary")
        cache.record_chunk(A, "summary", "old")
        cache.record_status(A, "summary", TabStatus.COMPLETED)

        cache.begin_tab(A, "summary")

        assert cache.get(A).data["summary"] == ""
        assert cache.get(A).is_generating("summary")

    def test_completion_stamps_and_clears_stale(self, cache):
        result = cache.start_new(A)
        result.timestamp = 0
        cache.begin_tab(A, "summary")
        cache.mark_stale(A)

        cache.record_status(A, "summary", TabStatus.COMPLETED)

        assert result.timestamp > 0
        assert result.is_stale is False

    def test_interrupt_keeps_timestamp(self, cache):
        result = cache.start_new(A)
        result.timestamp = 123
        cache.begin_tab(A, "summary")

        cache.record_status(A, "summary", TabStatus.INTERRUPTED)

        assert result.timestamp == 123
        assert result.status["summary"] is TabStatus.INTERRUPTED

    def test_mark_stale_leaves_text_and_status(self, cache):
        cache.begin_tab(A, "summary")
        cache.record_chunk(A, "summary", "text")

        assert cache.mark_stale(A) is True
        assert cache.get(A).data == {"summary": "text"}
        assert cache.get(A).status == {"summary": TabStatus.GENERATING}
        assert cache.mark_stale(B) is False

    def test_evict(self, cache):
        cache.start_new(A)
        assert cache.evict(A) is not None
        assert cache.get(A) is None
        assert cache.evict(A) is None


@pytest.mark.unit
class TestPersistence:
    def test_round_trip_preserves_settled_entries(self):
        entries = {
            A: AnalysisResult(
                data={"summary": "Hello", "opt": "partial"},
                status={"summary": TabStatus.COMPLETED, "opt": TabStatus.INTERRUPTED},
                timestamp=1700000000000,
                is_stale=True,
            ),
            B: AnalysisResult(data={}, status={}, timestamp=None, is_stale=False),
        }

        restored = deserialize_entries(serialize_entries(entries))

        assert restored == entries
        assert list(restored) == [A, B]

    def test_layout_is_list_of_pairs_with_wire_names(self, cache):
        cache.begin_tab(A, "summary")
        cache.record_status(A, "summary", TabStatus.COMPLETED)

        payload = orjson.loads(cache.serialize())

        assert payload[0][0] == A
        assert set(payload[0][1]) == {"data", "status", "timestamp", "isStale"}
        assert payload[0][1]["status"] == {"summary": "completed"}

    def test_generating_is_persisted_as_interrupted(self, cache):
        cache.begin_tab(A, "summary")
        cache.record_chunk(A, "summary", "half")

        restored = deserialize_entries(cache.serialize())

        assert restored[A].status["summary"] is TabStatus.INTERRUPTED
        assert restored[A].data["summary"] == "half"
        assert cache.get(A).status["summary"] is TabStatus.GENERATING

    def test_persist_then_load(self):
        store = InMemoryStore()
        writer = ResultCache(store)
        writer.begin_tab(A, "summary")
        writer.record_chunk(A, "summary", "done")
        writer.record_status(A, "summary", TabStatus.COMPLETED)
        writer.persist()

        reader = ResultCache(store)

        assert reader.load() == 1
        assert reader.get(A) == writer.get(A)

    @pytest.mark.parametrize("raw", [b"not json", b'{"a": 1}', b'[["only-key"]]', b'[["k", {"status": {"t": "bogus"}}]]'])
    def test_corrupt_payload_raises(self, raw):
        with pytest.raises(PersistenceError):
            deserialize_entries(raw)

    def test_load_discards_corrupt_store(self):
        cache = ResultCache(InMemoryStore({STORE_KEY_RESULT_CACHE: b"garbage"}))

        assert cache.load() == 0
        assert len(cache) == 0

    def test_store_failures_are_contained(self):
        cache = ResultCache(FailingStore())
        cache.start_new(A)

        assert cache.load() == 0
        cache.persist()

    def test_no_store(self):
        cache = ResultCache()
        cache.start_new(A)

        cache.persist()
        assert cache.load() == 0
