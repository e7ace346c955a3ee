from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from .collector import FlushReport


@dataclass
class RunReport:
    documents: int = 0
    anomalies: list[str] = field(default_factory=list)
    unminified: list[str] = field(default_factory=list)
    unresolved: dict[str, list[str]] = field(default_factory=dict)
    flush: FlushReport = field(default_factory=FlushReport)
    locale_path: Path | None = None
    skipped: bool = False

    @property
    def unresolved_count(self) -> int:
        return sum(len(keys) for keys in self.unresolved.values())

    def summary(self) -> dict[str, object]:
        return {
            "documents": self.documents,
            "anomalies": len(self.anomalies),
            "unminified": len(self.unminified),
            "requested": self.flush.requested,
            "translated": self.flush.translated,
            "failed_chunks": self.flush.failed_chunks,
            "unresolved_tokens": self.unresolved_count,
        }


def write_report_file(anomalies: list[str], path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(list(anomalies), indent=2), encoding="utf-8")
    return path


def write_locale_file(entries: dict[str, str], directory: str | Path, lang: str) -> Path:
    locale_dir = Path(directory) / "locales"
    locale_dir.mkdir(parents=True, exist_ok=True)
    path = locale_dir / f"{lang}.json"
    path.write_text(json.dumps(entries, indent=2, ensure_ascii=False), encoding="utf-8")
    return path
