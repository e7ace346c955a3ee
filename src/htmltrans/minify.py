from __future__ import annotations

import re
from dataclasses import dataclass

import minify_html
from bs4 import BeautifulSoup


class MinifyError(RuntimeError):
    pass


DOCTYPE_RE = re.compile(r"<!doctype\s+", re.IGNORECASE)


@dataclass(frozen=True)
class MinifyOptions:
    # minify-html always collapses whitespace and never rewrites URLs
    keep_comments: bool = False
    keep_closing_tags: bool = True
    keep_closing_slash: bool = True
    keep_html_and_head_opening_tags: bool = True
    minify_css: bool = False
    minify_js: bool = False
    preserve_brace_template_syntax: bool = True


DEFAULT_OPTIONS = MinifyOptions()


def _reserialize(html: str) -> str:
    # html.parser closes <x/> in place and bs4 writes void elements as <br/>
    return BeautifulSoup(DOCTYPE_RE.sub("<!DOCTYPE ", html), "html.parser").decode()


def minify_document(html: str, options: MinifyOptions = DEFAULT_OPTIONS) -> str:
    """Minify ``html`` without losing self-closing structure.

    minify-html drops the trailing slash of ``<app-icon/>``, which turns it
    into an open tag that swallows its siblings. The document is therefore
    passed through bs4 first, so such tags get an explicit end tag, and again
    afterwards to put the slash back on void elements.
    """
    try:
        minified = minify_html.minify(
            _reserialize(html),
            keep_comments=options.keep_comments,
            keep_closing_tags=options.keep_closing_tags,
            keep_html_and_head_opening_tags=options.keep_html_and_head_opening_tags,
            minify_css=options.minify_css,
            minify_js=options.minify_js,
            preserve_brace_template_syntax=options.preserve_brace_template_syntax,
        )
        if options.keep_closing_slash:
            minified = _reserialize(minified)
    except Exception as exc:
        raise MinifyError(str(exc)) from exc
    return minified
