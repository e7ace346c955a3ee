from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


class TranslationServiceError(RuntimeError):
    pass


@dataclass(frozen=True)
class TranslationItem:
    key: str
    text: str
    interpolations: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TranslatedItem:
    key: str
    source_text: str
    translated_text: str
    interpolations: dict[str, str] = field(default_factory=dict)


class TranslationBackend(Protocol):
    name: str

    def translate_batch(
        self, items: list[TranslationItem], source_lang: str, target_lang: str
    ) -> list[TranslatedItem]:
        ...
