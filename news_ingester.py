"""News-category ingestion: multi-feed fetch, link dedup, localization."""

from __future__ import annotations

import logging
from typing import Any

from config import NEWS_CATEGORY_LABELS, NEWS_FEEDS, NEWS_LIMIT
from models import FeedItem, FeedSource, NewsItem
from rss_feed import parse_rss_items
from run_state import RunState, SourceRun, SourceState
from transport import fetch_text
from translator import Translator

SYNOPSIS_DESC_MAX_CHARS = 80
NO_DESCRIPTION_POINT = "核心要点：报道聚焦最新进展与潜在影响。"

LOGGER = logging.getLogger(__name__)


def summarize_news(title_zh: str, desc_zh: str, category: str) -> str:
    """One-line category-labeled synopsis in Chinese."""
    label = NEWS_CATEGORY_LABELS.get(category, "新闻")
    desc = (desc_zh or "").strip()
    if desc:
        ellipsis = "..." if len(desc) > SYNOPSIS_DESC_MAX_CHARS else ""
        point = f"核心要点：{desc[:SYNOPSIS_DESC_MAX_CHARS]}{ellipsis}"
    else:
        point = NO_DESCRIPTION_POINT
    return f"这是一条{label}新闻，重点围绕“{title_zh}”。{point}"


def merge_feed_items(
    per_feed: list[tuple[FeedSource, list[FeedItem]]],
) -> list[tuple[FeedSource, FeedItem]]:
    """Concatenate items in feed order, keeping the first item for each link.

    Items without a link fall back to their title as the dedup key.
    """
    seen: set[str] = set()
    merged: list[tuple[FeedSource, FeedItem]] = []
    for feed, items in per_feed:
        for item in items:
            key = item.link or f"title:{item.title}"
            if key in seen:
                continue
            seen.add(key)
            merged.append((feed, item))
    return merged


def fetch_category_items(
    category: str,
    feeds: list[FeedSource],
    translator: Translator,
    source: SourceRun,
    limit: int = NEWS_LIMIT,
) -> list[NewsItem]:
    """Fetch, parse, merge and localize one category; feed failures are skipped."""
    source.advance(SourceState.FETCHING)
    raw_feeds: list[tuple[FeedSource, str]] = []
    for feed in feeds:
        try:
            raw_feeds.append((feed, fetch_text(feed.url)))
        except Exception as exc:  # one dead feed must not block the others
            LOGGER.warning("Feed fetch failed, skipping: category=%s source=%s url=%s: %s",
                           category, feed.source, feed.url, exc)

    source.advance(SourceState.PARSING)
    per_feed: list[tuple[FeedSource, list[FeedItem]]] = []
    for feed, xml_text in raw_feeds:
        try:
            items = parse_rss_items(xml_text)
        except Exception as exc:
            LOGGER.warning("Feed parse failed, skipping: category=%s source=%s: %s",
                           category, feed.source, exc)
            continue
        LOGGER.info("Feed: category=%s source=%s items=%s", category, feed.source, len(items))
        per_feed.append((feed, items))

    source.advance(SourceState.FILTERING)
    selected = merge_feed_items(per_feed)[:limit]

    localized: list[NewsItem] = []
    for feed, item in selected:
        title_zh = translator.translate(item.title)
        desc_zh = translator.translate(item.description or item.title)
        localized.append(
            NewsItem(
                title_zh=title_zh,
                summary_zh=summarize_news(title_zh, desc_zh, category),
                source=feed.source,
                published_at=item.pub_date,
                url=item.link,
            )
        )

    LOGGER.info("News %s: feeds_ok=%s/%s kept=%s", category, len(per_feed), len(feeds), len(localized))
    source.advance(SourceState.DONE)
    return localized


def ingest_news_category(
    category: str,
    run_state: RunState,
    translator: Translator,
    limit: int = NEWS_LIMIT,
    feeds: list[FeedSource] | None = None,
) -> list[dict[str, Any]]:
    """Return snapshot entries for *category*, falling back to the previous snapshot."""
    source = run_state.source(f"news/{category}")
    try:
        items = fetch_category_items(
            category,
            NEWS_FEEDS.get(category, []) if feeds is None else feeds,
            translator,
            source,
            limit=limit,
        )
    except Exception as exc:  # one category must not abort the run
        source.fall_back(exc)
        previous = run_state.previous_news(category)[:limit]
        LOGGER.warning(
            "%s news fetch failed, using %s previous entries: %s",
            category,
            len(previous),
            exc,
            exc_info=True,
        )
        return previous

    return [item.to_dict() for item in items]
