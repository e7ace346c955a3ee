from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import requests

from .base import TranslatedItem, TranslationItem, TranslationServiceError


log = logging.getLogger("htmltrans.engines.http_batch")

BATCH_ENDPOINT = "translations/batch-translation-text"


def _as_str_map(value: Any) -> dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): str(v) for k, v in value.items()}


@dataclass
class BatchTranslationClient:
    api_url: str
    session: requests.Session
    user_agent: str = "HtmlTranslationPipeline/0.1"
    timeout: int = 60
    source_field: str = "en_text"
    target_field: str = "te_text"

    name: str = "http_batch"

    @property
    def endpoint(self) -> str:
        return f"{self.api_url.rstrip('/')}/{BATCH_ENDPOINT}"

    def _post(self, payload: dict[str, Any]) -> Any:
        headers = {"User-Agent": self.user_agent}
        try:
            resp = self.session.post(
                self.endpoint, json=payload, headers=headers, timeout=self.timeout
            )
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as exc:
            raise TranslationServiceError(f"batch translation request failed: {exc}") from exc
        except ValueError as exc:
            raise TranslationServiceError("batch translation response is not JSON") from exc

    def _parse_item(self, raw: Any) -> TranslatedItem | None:
        if not isinstance(raw, dict):
            return None
        key = raw.get("key")
        translated = raw.get(self.target_field)
        if not key or not isinstance(translated, str):
            return None
        source = raw.get(self.source_field)
        return TranslatedItem(
            key=str(key),
            source_text=source if isinstance(source, str) else "",
            translated_text=translated,
            interpolations=_as_str_map(raw.get("interpolations")),
        )

    def translate_batch(
        self, items: list[TranslationItem], source_lang: str, target_lang: str
    ) -> list[TranslatedItem]:
        if not items:
            return []
        payload = {
            "source_lang": source_lang,
            "target_lang": target_lang,
            "translations": [
                {
                    "key": item.key,
                    self.source_field: item.text,
                    "interpolations": dict(item.interpolations),
                }
                for item in items
            ],
        }
        data = self._post(payload)
        if isinstance(data, dict):
            data = data.get("translations")
        if not isinstance(data, list):
            raise TranslationServiceError("batch translation response must be a list")

        results: list[TranslatedItem] = []
        for raw in data:
            item = self._parse_item(raw)
            if item is None:
                log.warning("ignoring malformed translation item: %r", raw)
                continue
            results.append(item)
        return results
