from __future__ import annotations

import re


_EXPR = r"\{\{[^}]+\}\}"

SKIP_PATTERNS = (
    re.compile(rf"\s*:?\s*{_EXPR}\s*:?\s*"),
    re.compile(rf"\s*\(?{_EXPR}\)?\s*"),
    re.compile(rf"\s*[^\w\s]{{0,2}}{_EXPR}[^\w\s]{{0,2}}\s*"),
    re.compile(r"\s*"),
    re.compile(r"[^\w\s]{1,3}"),
    re.compile(r"\s*<!--.*-->\s*", re.DOTALL),
    re.compile(r"\s*//[^\n]*\s*"),
    re.compile(r"\s*/\*.*?\*/\s*", re.DOTALL),
    re.compile(r"\s*\{\{--.*--\}\}\s*", re.DOTALL),
)


def _has_letter(text: str) -> bool:
    return any(ch.isalpha() for ch in text)


def should_skip(text: str) -> bool:
    """Return True when ``text`` carries nothing a translator should see."""
    if any(p.fullmatch(text) for p in SKIP_PATTERNS):
        return True
    if len(text) <= 3 and not _has_letter(text):
        return True
    return len(text.strip()) <= 2 and not _has_letter(text)
