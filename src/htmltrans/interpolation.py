from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass
class InterpolationResult:
    text: str
    interpolations: dict[str, str]


INTERPOLATION_RE = re.compile(r"\{\{[^}]+\}\}")


def placeholder_for(index: int) -> str:
    return f"[[INTP{index}]]"


def extract_interpolations(text: str) -> InterpolationResult:
    interpolations: dict[str, str] = {}
    if "{{" not in text:
        return InterpolationResult(text=text, interpolations=interpolations)

    counter = 0

    def _sub(match: re.Match) -> str:
        nonlocal counter
        # never reuse a token that the source already contains literally
        while placeholder_for(counter) in text:
            counter += 1
        key = placeholder_for(counter)
        counter += 1
        interpolations[key] = match.group(0)
        return key

    stripped = INTERPOLATION_RE.sub(_sub, text)
    return InterpolationResult(text=stripped, interpolations=interpolations)


def _placeholder_pattern(placeholders) -> re.Pattern:
    ordered = sorted(placeholders, key=len, reverse=True)
    return re.compile("|".join(re.escape(p) for p in ordered))


def restore_interpolations(text: str, interpolations: dict[str, str]) -> str:
    if not interpolations:
        return text
    pattern = _placeholder_pattern(interpolations.keys())
    seen: set[str] = set()

    def _sub(match: re.Match) -> str:
        token = match.group(0)
        if token in seen:
            return token
        seen.add(token)
        return interpolations[token]

    return pattern.sub(_sub, text)
