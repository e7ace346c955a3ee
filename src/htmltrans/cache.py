from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path


log = logging.getLogger("htmltrans.cache")


@dataclass(frozen=True)
class CacheRecord:
    source_text: str
    translated_text: str | None
    interpolations: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "source_text": self.source_text,
            "translated_text": self.translated_text,
            "interpolations": dict(self.interpolations),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CacheRecord":
        # older cache files use en_text/te_text
        source = data.get("source_text", data.get("en_text"))
        if not isinstance(source, str):
            raise ValueError("cache record missing source_text")
        translated = data.get("translated_text", data.get("te_text"))
        if translated is not None and not isinstance(translated, str):
            raise ValueError("cache record translated_text must be a string")
        raw = data.get("interpolations") or {}
        if not isinstance(raw, dict):
            raise ValueError("cache record interpolations must be an object")
        return cls(
            source_text=source,
            translated_text=translated,
            interpolations={str(k): str(v) for k, v in raw.items()},
        )


class TranslationCache:
    """Key -> CacheRecord store, loaded and flushed as one JSON file.

    Single writer, single process: there is no locking and no incremental
    write. A missing or unreadable file gives an empty cache.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._records: dict[str, CacheRecord] = {}
        self.load()

    def load(self) -> None:
        self._records = {}
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("could not read cache %s, starting empty: %s", self.path, exc)
            return
        if not isinstance(data, dict):
            log.warning("cache %s is not a JSON object, starting empty", self.path)
            return
        for key, raw in data.items():
            if not isinstance(raw, dict):
                log.warning("dropping malformed cache record %s", key)
                continue
            try:
                self._records[str(key)] = CacheRecord.from_dict(raw)
            except ValueError as exc:
                log.warning("dropping malformed cache record %s: %s", key, exc)
        log.info("loaded translation cache entries=%s", len(self._records))

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {key: record.to_dict() for key, record in self._records.items()}
        self.path.write_text(
            json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8"
        )
        log.info("saved translation cache entries=%s path=%s", len(self._records), self.path)

    def get(self, key: str) -> CacheRecord | None:
        return self._records.get(key)

    def put(self, key: str, record: CacheRecord) -> None:
        self._records[key] = record

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)
