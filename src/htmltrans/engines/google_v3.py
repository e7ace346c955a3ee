from __future__ import annotations

import json
from dataclasses import dataclass

from google.api_core import exceptions as google_exceptions
from google.cloud import translate

from .base import TranslatedItem, TranslationItem, TranslationServiceError


# Google keeps the script subtag for these; everything else is keyed by the
# primary language subtag only (te-IN -> te).
_SCRIPT_LANGS = {"zh-CN", "zh-TW", "zh-Hans", "zh-Hant", "sr-Latn"}


def engine_lang_for(lang: str) -> str:
    if lang in _SCRIPT_LANGS:
        return lang
    return lang.split("-", 1)[0]


def resolve_project_id(cfg_project_id: str | None, credentials_path: str | None) -> str | None:
    if cfg_project_id:
        return cfg_project_id
    if not credentials_path:
        return None
    try:
        with open(credentials_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return None
    return data.get("project_id")


@dataclass
class GoogleTranslateV3:
    project_id: str
    location: str = "global"
    credentials_path: str | None = None

    name: str = "google_v3"

    def _client(self) -> translate.TranslationServiceClient:
        if self.credentials_path:
            return translate.TranslationServiceClient.from_service_account_file(
                self.credentials_path
            )
        return translate.TranslationServiceClient()

    def translate(self, texts: list[str], source_lang: str, target_lang: str) -> list[str]:
        if not texts:
            return []
        if not self.project_id:
            raise RuntimeError("GCP project_id is required for Google Translate v3")

        client = self._client()
        request = {
            "parent": f"projects/{self.project_id}/locations/{self.location}",
            "contents": list(texts),
            "mime_type": "text/plain",
            "source_language_code": engine_lang_for(source_lang),
            "target_language_code": engine_lang_for(target_lang),
        }
        response = client.translate_text(request=request)
        return [t.translated_text for t in response.translations]

    def translate_batch(
        self, items: list[TranslationItem], source_lang: str, target_lang: str
    ) -> list[TranslatedItem]:
        try:
            texts = self.translate([item.text for item in items], source_lang, target_lang)
        except google_exceptions.GoogleAPIError as exc:
            raise TranslationServiceError(f"google translate failed: {exc}") from exc
        if len(texts) != len(items):
            raise TranslationServiceError(
                f"google translate returned {len(texts)} results for {len(items)} texts"
            )
        return [
            TranslatedItem(
                key=item.key,
                source_text=item.text,
                translated_text=text,
                interpolations=dict(item.interpolations),
            )
            for item, text in zip(items, texts)
        ]
