from __future__ import annotations

import os
from dataclasses import dataclass


BACKENDS = ("http", "google")


@dataclass(frozen=True)
class Config:
    api_url: str | None

    lang: str = "te-IN"
    source_lang: str = "en-US"

    html_dir: str = "public/en-US"
    dist_dir: str = "public/te-IN"
    output_path: str | None = None
    cache_path: str = "translation-cache.json"
    report_path: str = "missing_translation_files.json"

    chunk_size: int = 500
    backend: str = "http"
    timeout: int = 60
    user_agent: str = "HtmlTranslationPipeline/0.1"
    source_field: str = "en_text"
    target_field: str = "te_text"

    gcp_project_id: str | None = None
    gcp_location: str = "global"
    gcp_credentials_path: str | None = None

    @property
    def use_translation(self) -> bool:
        return self.lang != self.source_lang

    @property
    def trigger_path(self) -> str:
        return self.output_path or self.dist_dir


def load_config(require_api_url: bool = True) -> Config:
    def _int(name: str, default: int) -> int:
        raw = os.getenv(name)
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            raise RuntimeError(f"{name} must be an integer") from exc
        if value <= 0:
            raise RuntimeError(f"{name} must be positive")
        return value

    backend = os.getenv("TRANSLATION_BACKEND", "http").strip().lower()
    if backend not in BACKENDS:
        raise RuntimeError(f"TRANSLATION_BACKEND must be one of: {', '.join(BACKENDS)}")

    api_url = os.getenv("TRANSLATION_API_URL") or None
    if require_api_url and backend == "http" and not api_url:
        raise RuntimeError("Missing required env var: TRANSLATION_API_URL")

    cfg = Config(
        api_url=api_url,
        lang=os.getenv("TRANSLATION_LANG", "te-IN"),
        source_lang=os.getenv("TRANSLATION_SOURCE_LANG", "en-US"),
        html_dir=os.getenv("TRANSLATION_HTML_DIR", "public/en-US"),
        dist_dir=os.getenv("TRANSLATION_DIST_DIR", "public/te-IN"),
        output_path=os.getenv("TRANSLATION_OUTPUT_PATH") or None,
        cache_path=os.getenv("TRANSLATION_CACHE_PATH", "translation-cache.json"),
        report_path=os.getenv("TRANSLATION_REPORT_PATH", "missing_translation_files.json"),
        chunk_size=_int("TRANSLATION_CHUNK_SIZE", 500),
        backend=backend,
        timeout=_int("TRANSLATION_TIMEOUT", 60),
        user_agent=os.getenv("TRANSLATION_USER_AGENT", "HtmlTranslationPipeline/0.1"),
        source_field=os.getenv("TRANSLATION_SOURCE_FIELD", "en_text"),
        target_field=os.getenv("TRANSLATION_TARGET_FIELD", "te_text"),
        gcp_project_id=os.getenv("GCP_PROJECT_ID"),
        gcp_location=os.getenv("GCP_LOCATION", "global"),
        gcp_credentials_path=os.getenv("GCP_CREDENTIALS_PATH")
        or os.getenv("GCP_CREDENTIALS_JSON"),
    )
    return cfg
