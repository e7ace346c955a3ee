import pytest
from google.api_core import exceptions as google_exceptions

from htmltrans.engines.base import TranslationItem, TranslationServiceError
from htmltrans.engines.google_v3 import GoogleTranslateV3, engine_lang_for, resolve_project_id


def test_google_engine_requires_project_id():
    engine = GoogleTranslateV3(project_id="")
    with pytest.raises(RuntimeError):
        engine.translate(["hello"], "en", "sr")


def test_engine_lang_for():
    assert engine_lang_for("te-IN") == "te"
    assert engine_lang_for("en") == "en"
    assert engine_lang_for("zh-TW") == "zh-TW"


def test_resolve_project_id(tmp_path):
    creds = tmp_path / "creds.json"
    creds.write_text('{"project_id": "from-file"}', encoding="utf-8")
    assert resolve_project_id("explicit", str(creds)) == "explicit"
    assert resolve_project_id(None, str(creds)) == "from-file"
    assert resolve_project_id(None, str(tmp_path / "missing.json")) is None
    assert resolve_project_id(None, None) is None


def test_translate_batch_maps_results(monkeypatch):
    engine = GoogleTranslateV3(project_id="demo")
    seen = {}

    def fake_translate(texts, source_lang, target_lang):
        seen["args"] = (texts, source_lang, target_lang)
        return [t.upper() for t in texts]

    monkeypatch.setattr(engine, "translate", fake_translate)
    items = [TranslationItem(key="k", text="hi [[INTP0]]", interpolations={"[[INTP0]]": "{{x}}"})]

    result = engine.translate_batch(items, "en-US", "te-IN")

    assert seen["args"] == (["hi [[INTP0]]"], "en-US", "te-IN")
    assert result[0].key == "k"
    assert result[0].translated_text == "HI [[INTP0]]"
    assert result[0].interpolations == {"[[INTP0]]": "{{x}}"}


def test_translate_batch_wraps_api_errors(monkeypatch):
    engine = GoogleTranslateV3(project_id="demo")

    def failing(texts, source_lang, target_lang):
        raise google_exceptions.ServiceUnavailable("down")

    monkeypatch.setattr(engine, "translate", failing)
    with pytest.raises(TranslationServiceError):
        engine.translate_batch([TranslationItem(key="k", text="hi")], "en-US", "te-IN")
