"""Plain-text extraction from XML/HTML fragments."""

from __future__ import annotations

import html
import re

# A tag must open with a name, "/", "!" or "?"; "<65" or "< 0.05" is text.
_TAG_RE = re.compile(r"<[A-Za-z/!?][^<>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_CDATA_RE = re.compile(r"<!\[CDATA\[|\]\]>")


def strip_markup(fragment: str | None) -> str:
    """Strip tags, decode entities and collapse whitespace.

    Tags are removed before and after entity decoding so that escaped markup
    such as ``&lt;b&gt;`` does not survive as a literal tag; this keeps the
    function idempotent. Decoded comparison operators (``&lt;65``) are kept.
    """
    if not fragment:
        return ""
    text = _TAG_RE.sub(" ", fragment)
    text = html.unescape(text)
    text = _TAG_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def unwrap_cdata(fragment: str | None) -> str:
    """Remove literal ``<![CDATA[`` / ``]]>`` wrappers, keeping the content."""
    if not fragment:
        return ""
    return _CDATA_RE.sub("", fragment)
