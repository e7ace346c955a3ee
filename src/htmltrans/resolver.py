from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from bs4.dammit import EntitySubstitution

from .cache import CacheRecord, TranslationCache
from .interpolation import restore_interpolations
from .keys import TOKEN_RE


log = logging.getLogger("htmltrans.resolver")


@dataclass
class ResolveResult:
    text: str
    resolved: int = 0
    unresolved: list[str] = field(default_factory=list)


def render_record(record: CacheRecord, use_translation: bool) -> str:
    text = record.source_text
    if use_translation and record.translated_text:
        text = record.translated_text
    text = restore_interpolations(text, record.interpolations)
    return EntitySubstitution.substitute_xml_containing_entities(text)


def resolve_tokens(html: str, cache: TranslationCache, use_translation: bool) -> ResolveResult:
    result = ResolveResult(text=html)

    def _sub(match: re.Match) -> str:
        key = match.group(1)
        record = cache.get(key)
        if record is None:
            result.unresolved.append(key)
            return match.group(0)
        result.resolved += 1
        return render_record(record, use_translation)

    result.text = TOKEN_RE.sub(_sub, html)
    if result.unresolved:
        log.warning("left %s reference tokens unresolved", len(result.unresolved))
    return result
