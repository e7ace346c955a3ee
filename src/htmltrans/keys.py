from __future__ import annotations

import hashlib
import json
import re

from .interpolation import INTERPOLATION_RE


KEY_MARKER = "[[INTP]]"
TOKEN_RE = re.compile(r"__TRANS__([a-f0-9]{32})__")


def _normalize(text: str) -> str:
    # second pass over anything the guard left behind; whitespace is kept as-is
    return INTERPOLATION_RE.sub(KEY_MARKER, text)


def make_key(text: str, interpolations: dict[str, str]) -> str:
    payload = _normalize(text) + json.dumps(
        sorted(interpolations.items()), ensure_ascii=False, separators=(",", ":")
    )
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


def reference_token(key: str) -> str:
    return f"__TRANS__{key}__"
