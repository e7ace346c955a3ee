import pytest

from htmltrans.cache import CacheRecord, TranslationCache
from htmltrans.collector import BatchCollector
from htmltrans.engines.base import TranslatedItem, TranslationServiceError


class FakeBackend:
    name = "fake"

    def __init__(self, fail_on_calls=()):
        self.calls = []
        self.fail_on_calls = set(fail_on_calls)

    def translate_batch(self, items, source_lang, target_lang):
        self.calls.append(list(items))
        if len(self.calls) in self.fail_on_calls:
            raise TranslationServiceError("boom")
        return [
            TranslatedItem(
                key=item.key,
                source_text=item.text,
                translated_text=item.text.upper(),
                interpolations=item.interpolations,
            )
            for item in items
        ]


@pytest.fixture
def cache(tmp_path):
    return TranslationCache(tmp_path / "cache.json")


def test_enqueue_same_key_twice_sends_once(cache):
    collector = BatchCollector(cache)
    collector.enqueue("k1", "hello", {}, "a.html")
    collector.enqueue("k1", "hello", {}, "b.html")
    backend = FakeBackend()

    report = collector.flush(backend, "en-US", "te-IN")

    assert len(backend.calls) == 1
    assert [item.key for item in backend.calls[0]] == ["k1"]
    assert report.requested == 1
    assert report.translated == 1
    assert cache.get("k1") == CacheRecord("hello", "HELLO", {})
    assert collector.pending == {}


def test_cache_hit_is_not_enqueued(cache):
    cache.put("k1", CacheRecord("hello", "HELLO", {}))
    collector = BatchCollector(cache)
    collector.enqueue("k1", "hello", {}, "a.html")
    backend = FakeBackend()

    report = collector.flush(backend, "en-US", "te-IN")

    assert backend.calls == []
    assert report.requested == 0
    assert collector.locale(use_translation=True) == {"k1": "HELLO"}
    assert collector.locale(use_translation=False) == {"k1": "hello"}


def test_entries_are_chunked_in_order(cache):
    collector = BatchCollector(cache, chunk_size=2)
    for i in range(5):
        collector.enqueue(f"k{i}", f"text {i}", {}, None)
    backend = FakeBackend()

    collector.flush(backend, "en-US", "te-IN")

    assert [[item.key for item in call] for call in backend.calls] == [
        ["k0", "k1"],
        ["k2", "k3"],
        ["k4"],
    ]


def test_failed_chunk_is_reported_and_not_cached(cache):
    collector = BatchCollector(cache, chunk_size=2)
    for i in range(4):
        collector.enqueue(f"k{i}", f"text {i}", {}, None)
    backend = FakeBackend(fail_on_calls={1})

    report = collector.flush(backend, "en-US", "te-IN")

    assert report.failed_chunks == 1
    assert report.failed_keys == ["k0", "k1"]
    assert report.translated == 2
    assert "k0" not in cache
    assert "k1" not in cache
    assert cache.get("k2").translated_text == "TEXT 2"
    assert collector.pending == {}

    # a second flush in the same run does not retry the failed chunk
    collector.flush(backend, "en-US", "te-IN")
    assert len(backend.calls) == 2


def test_unknown_and_missing_keys_in_response(cache):
    class PartialBackend:
        name = "partial"

        def translate_batch(self, items, source_lang, target_lang):
            return [
                TranslatedItem(key="stranger", source_text="x", translated_text="y"),
                TranslatedItem(key=items[0].key, source_text="", translated_text="one"),
            ]

    collector = BatchCollector(cache)
    collector.enqueue("a", "first", {"[[INTP0]]": "{{x}}"}, None)
    collector.enqueue("b", "second", {}, None)

    report = collector.flush(PartialBackend(), "en-US", "te-IN")

    assert "stranger" not in cache
    assert cache.get("a") == CacheRecord("first", "one", {"[[INTP0]]": "{{x}}"})
    assert "b" not in cache
    assert report.failed_keys == ["b"]


def test_chunk_size_must_be_positive(cache):
    with pytest.raises(ValueError):
        BatchCollector(cache, chunk_size=0)
