"""RSS item extraction."""

from __future__ import annotations

import logging

import feedparser

from markup import strip_markup, unwrap_cdata
from models import FeedItem

LOGGER = logging.getLogger(__name__)


def parse_rss_items(xml_text: str) -> list[FeedItem]:
    """Parse an RSS document into FeedItems in document order.

    Items missing both a title and a link are dropped. Malformed documents
    yield whatever entries feedparser could recover.
    """
    parsed = feedparser.parse(xml_text or "")
    if parsed.get("bozo"):
        LOGGER.debug("Feed parser reported a malformed document: %s", parsed.get("bozo_exception"))

    items: list[FeedItem] = []
    for entry in parsed.get("entries", []):
        title = _clean(entry.get("title"))
        link = _clean(entry.get("link"))
        if not title and not link:
            continue
        items.append(
            FeedItem(
                title=title,
                link=link,
                pub_date=_clean(entry.get("published")),
                description=_clean(entry.get("summary") or entry.get("description")),
            )
        )
    return items


def _clean(value: object) -> str:
    return strip_markup(unwrap_cdata(value)) if isinstance(value, str) else ""
