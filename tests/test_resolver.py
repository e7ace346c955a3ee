from htmltrans.cache import CacheRecord, TranslationCache
from htmltrans.keys import make_key, reference_token
from htmltrans.resolver import resolve_tokens


def _cache(tmp_path, records):
    cache = TranslationCache(tmp_path / "cache.json")
    for key, record in records.items():
        cache.put(key, record)
    return cache


def test_token_resolves_to_translation_with_interpolations(tmp_path):
    mapping = {"[[INTP0]]": "{{user}}"}
    key = make_key("Welcome [[INTP0]]!", mapping)
    cache = _cache(tmp_path, {key: CacheRecord("Welcome [[INTP0]]!", "స్వాగతం [[INTP0]]!", mapping)})

    result = resolve_tokens(f"<p>{reference_token(key)}</p>", cache, use_translation=True)

    assert result.text == "<p>స్వాగతం {{user}}!</p>"
    assert result.resolved == 1
    assert result.unresolved == []


def test_source_text_used_when_not_translating(tmp_path):
    key = make_key("Hello", {})
    cache = _cache(tmp_path, {key: CacheRecord("Hello", "హలో", {})})

    result = resolve_tokens(reference_token(key), cache, use_translation=False)

    assert result.text == "Hello"


def test_source_text_used_when_translation_missing(tmp_path):
    key = make_key("Hello", {})
    cache = _cache(tmp_path, {key: CacheRecord("Hello", None, {})})

    assert resolve_tokens(reference_token(key), cache, use_translation=True).text == "Hello"


def test_unknown_token_is_left_verbatim(tmp_path):
    cache = _cache(tmp_path, {})
    token = reference_token("0" * 32)

    result = resolve_tokens(f"<p>{token}</p>", cache, use_translation=True)

    assert result.text == f"<p>{token}</p>"
    assert result.unresolved == ["0" * 32]


def test_markup_characters_are_escaped_but_entities_kept(tmp_path):
    key = make_key("Tom & Jerry", {})
    cache = _cache(tmp_path, {key: CacheRecord("Tom & Jerry", "Tom &amp; Jerry <3", {})})

    result = resolve_tokens(reference_token(key), cache, use_translation=True)

    assert result.text == "Tom &amp; Jerry &lt;3"
