from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .cache import CacheRecord, TranslationCache
from .engines.base import TranslationBackend, TranslationItem, TranslationServiceError


log = logging.getLogger("htmltrans.collector")

DEFAULT_CHUNK_SIZE = 500


@dataclass(frozen=True)
class PendingEntry:
    key: str
    text: str
    interpolations: dict[str, str]
    origin: str | None = None


@dataclass
class FlushReport:
    requested: int = 0
    translated: int = 0
    failed_chunks: int = 0
    failed_keys: list[str] = field(default_factory=list)


class BatchCollector:
    """Collects fragments that have no cache entry yet and translates them in chunks.

    Every key is handled once per run: a cache hit or a pending entry makes
    later ``enqueue`` calls for the same key no-ops. Chunks are sent one at a
    time; a failed chunk is logged and its keys stay untranslated for the run.
    """

    def __init__(self, cache: TranslationCache, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.cache = cache
        self.chunk_size = chunk_size
        self.pending: dict[str, PendingEntry] = {}
        self._source: dict[str, str] = {}
        self._target: dict[str, str] = {}

    def is_resolved(self, key: str) -> bool:
        return key in self._source

    def _mark_resolved(self, key: str, record: CacheRecord) -> None:
        self._source[key] = record.source_text
        if record.translated_text is not None:
            self._target[key] = record.translated_text

    def enqueue(
        self,
        key: str,
        text: str,
        interpolations: dict[str, str],
        origin: str | None = None,
    ) -> None:
        if self.is_resolved(key) or key in self.pending:
            return
        record = self.cache.get(key)
        if record is not None:
            self._mark_resolved(key, record)
            return
        self.pending[key] = PendingEntry(
            key=key, text=text, interpolations=dict(interpolations), origin=origin
        )

    def chunks(self) -> list[list[PendingEntry]]:
        entries = list(self.pending.values())
        return [
            entries[i : i + self.chunk_size]
            for i in range(0, len(entries), self.chunk_size)
        ]

    def flush(
        self, backend: TranslationBackend, source_lang: str, target_lang: str
    ) -> FlushReport:
        report = FlushReport(requested=len(self.pending))
        if not self.pending:
            return report

        for idx, chunk in enumerate(self.chunks(), start=1):
            items = [
                TranslationItem(key=e.key, text=e.text, interpolations=e.interpolations)
                for e in chunk
            ]
            try:
                translated = backend.translate_batch(items, source_lang, target_lang)
            except TranslationServiceError as exc:
                log.warning("batch translation chunk %s failed (%s items): %s", idx, len(chunk), exc)
                report.failed_chunks += 1
                report.failed_keys.extend(e.key for e in chunk)
                continue

            by_key = {e.key: e for e in chunk}
            done = 0
            for item in translated:
                entry = by_key.get(item.key)
                if entry is None:
                    log.warning("ignoring translation for unknown key %s", item.key)
                    continue
                record = CacheRecord(
                    source_text=item.source_text or entry.text,
                    translated_text=item.translated_text,
                    interpolations=item.interpolations or entry.interpolations,
                )
                self.cache.put(item.key, record)
                self._mark_resolved(item.key, record)
                done += 1
            missing = [key for key in by_key if not self.is_resolved(key)]
            if missing:
                log.warning("chunk %s: no translation returned for %s keys", idx, len(missing))
                report.failed_keys.extend(missing)
            report.translated += done
            log.info("batch translated chunk %s: %s/%s items via %s", idx, done, len(chunk), backend.name)

        self.pending.clear()
        return report

    def discard_pending(self) -> list[str]:
        keys = list(self.pending)
        self.pending.clear()
        return keys

    def locale(self, use_translation: bool) -> dict[str, str]:
        if not use_translation:
            return dict(self._source)
        return {key: self._target.get(key, text) for key, text in self._source.items()}
