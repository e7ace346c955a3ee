from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from .classifier import should_skip
from .collector import BatchCollector
from .interpolation import extract_interpolations, restore_interpolations
from .keys import make_key, reference_token


log = logging.getLogger("htmltrans.walker")

NON_TEXT_CONTAINERS = frozenset({"style", "script"})
INLINE_BREAK_RE = re.compile(r"(&nbsp;|\xa0|<br\s*/?>)", re.IGNORECASE)
FULL_DOCUMENT_RE = re.compile(r"<html|<!doctype", re.IGNORECASE)


@dataclass
class WalkResult:
    path: str
    keys: list[str] = field(default_factory=list)


def parse_document(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def serialize_document(soup: BeautifulSoup, original: str) -> str:
    if FULL_DOCUMENT_RE.search(original):
        return soup.decode()
    return soup.decode().strip()


def _is_text_node(node) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


class DocumentWalker:
    def __init__(self, collector: BatchCollector) -> None:
        self.collector = collector

    def _tokenize(self, text: str, origin: str, keys: list[str]) -> str:
        result = extract_interpolations(text)
        parts = INLINE_BREAK_RE.split(result.text)
        out: list[str] = []
        for idx, part in enumerate(parts):
            # odd indexes are the captured break markers
            if idx % 2 == 1:
                out.append(part)
                continue
            if should_skip(restore_interpolations(part, result.interpolations)):
                out.append(part)
                continue
            key = make_key(part, result.interpolations)
            self.collector.enqueue(key, part, result.interpolations, origin)
            keys.append(key)
            out.append(reference_token(key))
        return restore_interpolations("".join(out), result.interpolations)

    def walk(self, soup: BeautifulSoup, origin: str) -> WalkResult:
        """Replace every translatable text node below ``soup`` with reference tokens.

        Nodes are visited in document order from an explicit stack; ``style``
        and ``script`` subtrees are never entered.
        """
        result = WalkResult(path=origin)
        stack: list = [soup]
        while stack:
            node = stack.pop()
            if isinstance(node, Tag):
                if node.name in NON_TEXT_CONTAINERS:
                    continue
                stack.extend(reversed(list(node.children)))
                continue
            if not _is_text_node(node):
                continue
            text = str(node)
            if should_skip(text):
                continue
            replacement = self._tokenize(text, origin, result.keys)
            if replacement != text:
                node.replace_with(replacement)
        log.debug("walked %s fragments=%s", origin, len(result.keys))
        return result
