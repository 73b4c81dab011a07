"""Shared typed models for the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Topic:
    """A research subject with its PubMed search query."""

    key: str
    query: str
    label_zh: str


@dataclass(frozen=True, slots=True)
class FeedSource:
    """One RSS endpoint belonging to a news category."""

    source: str
    url: str


@dataclass(frozen=True, slots=True)
class FeedItem:
    """A single RSS item after markup extraction."""

    title: str
    link: str
    pub_date: str
    description: str


@dataclass(frozen=True, slots=True)
class ResearchRecord:
    """Normalized PubMed record emitted into the snapshot."""

    pmid: str
    title: str
    journal: str
    pub_date: str
    study_type: str
    authors: str
    abstract: str
    zh_summary: str
    url: str
    pubmed_url: str
    doi_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the key names the display layer reads."""
        return {
            "title": self.title,
            "journal": self.journal,
            "pubDate": self.pub_date,
            "studyType": self.study_type,
            "authors": self.authors,
            "zhSummary": self.zh_summary,
            "abstract": self.abstract,
            "pmid": self.pmid,
            "pubmedUrl": self.pubmed_url,
            "doiUrl": self.doi_url,
            "url": self.url,
        }


@dataclass(frozen=True, slots=True)
class NewsItem:
    """Localized news item emitted into the snapshot."""

    title_zh: str
    summary_zh: str
    source: str
    published_at: str
    url: str
    source_lang: str = "English"

    def to_dict(self) -> dict[str, Any]:
        return {
            "titleZh": self.title_zh,
            "summaryZh": self.summary_zh,
            "source": self.source,
            "sourceLang": self.source_lang,
            "publishedAt": self.published_at,
            "url": self.url,
        }
