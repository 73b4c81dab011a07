"""Research-topic ingestion: search, metadata, abstracts, filter, summarize."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from config import PAPER_LIMIT, SEARCH_RETMAX
from filters import is_primary_research, study_type_label
from models import ResearchRecord, Topic
from pubmed import (
    doi_url,
    fetch_abstract_xml,
    fetch_summaries,
    parse_abstract_map,
    parse_doi,
    pubmed_url,
    search_ids,
)
from run_state import RunState, SourceRun, SourceState
from summarizer import SummaryStrategy

ABSTRACT_MAX_CHARS = 700
NO_ABSTRACT = "No abstract available from PubMed."
MAX_AUTHORS = 3

LOGGER = logging.getLogger(__name__)


def compress_abstract(text: str | None, max_chars: int = ABSTRACT_MAX_CHARS) -> str:
    """Truncate with ``"..."``; the NO_ABSTRACT sentinel stands in for missing text."""
    if not text:
        return NO_ABSTRACT
    return f"{text[:max_chars]}..." if len(text) > max_chars else text


def format_authors(authors: Any) -> str:
    if not isinstance(authors, list):
        return "Unknown"
    names = [a.get("name") for a in authors[:MAX_AUTHORS] if isinstance(a, dict) and a.get("name")]
    return ", ".join(names) or "Unknown"


def build_record(
    pmid: str,
    item: dict[str, Any],
    abstract_text: str,
    topic: Topic,
    summarizer: SummaryStrategy,
) -> ResearchRecord:
    """Normalize one esummary entry plus its abstract into a ResearchRecord."""
    pubtypes = item.get("pubtype") if isinstance(item.get("pubtype"), list) else []
    study_type = study_type_label(pubtypes)
    title = item.get("title") or ""
    doi = parse_doi(item.get("elocationid"))
    article_url = pubmed_url(pmid)
    resolved_doi_url = doi_url(doi)

    return ResearchRecord(
        pmid=pmid,
        title=title or "无标题",
        journal=item.get("fulljournalname") or item.get("source") or "未知期刊",
        pub_date=item.get("pubdate") or "日期未知",
        study_type=study_type,
        authors=format_authors(item.get("authors")),
        abstract=compress_abstract(abstract_text),
        zh_summary=summarizer.summarize(
            topic_label=topic.label_zh,
            title=title,
            study_type=study_type,
            abstract_text=abstract_text[:ABSTRACT_MAX_CHARS],
        ),
        url=resolved_doi_url or article_url,
        pubmed_url=article_url,
        doi_url=resolved_doi_url,
    )


def fetch_topic_records(
    topic: Topic,
    seen: set[str],
    summarizer: SummaryStrategy,
    source: SourceRun,
    limit: int = PAPER_LIMIT,
    retmax: int = SEARCH_RETMAX,
) -> list[ResearchRecord]:
    """Run the fetch → parse → filter pipeline for one topic; raises on failure."""
    source.advance(SourceState.FETCHING)
    ids = search_ids(topic.query, retmax)
    if not ids:
        LOGGER.info("Topic %s: search returned no ids", topic.key)
        source.advance(SourceState.DONE)
        return []

    # Both reads are keyed by the same id batch and independent of each other.
    with ThreadPoolExecutor(max_workers=2) as pool:
        summaries_future = pool.submit(fetch_summaries, ids)
        abstract_xml_future = pool.submit(fetch_abstract_xml, ids)
        summaries = summaries_future.result()
        abstract_xml = abstract_xml_future.result()

    source.advance(SourceState.PARSING)
    abstracts = parse_abstract_map(abstract_xml)

    source.advance(SourceState.FILTERING)
    records: list[ResearchRecord] = []
    skipped_seen = skipped_type = skipped_missing = 0

    for pmid in ids:
        if pmid in seen:
            skipped_seen += 1
            continue
        item = summaries.get(pmid)
        if item is None:
            skipped_missing += 1
            continue
        pubtypes = item.get("pubtype") if isinstance(item.get("pubtype"), list) else []
        if not is_primary_research(pubtypes):
            skipped_type += 1
            continue

        records.append(build_record(pmid, item, abstracts.get(pmid, ""), topic, summarizer))
        if len(records) >= limit:
            break

    LOGGER.info(
        "Topic %s: candidates=%s kept=%s skipped_seen=%s skipped_type=%s skipped_missing=%s",
        topic.key,
        len(ids),
        len(records),
        skipped_seen,
        skipped_type,
        skipped_missing,
    )
    source.advance(SourceState.DONE)
    return records


def ingest_topic(
    topic: Topic,
    run_state: RunState,
    summarizer: SummaryStrategy,
    limit: int = PAPER_LIMIT,
) -> list[dict[str, Any]]:
    """Return snapshot entries for *topic*, falling back to the previous snapshot.

    On success the emitted PMIDs are recorded in the run's history set. On
    any failure the history for this topic is left untouched.
    """
    source = run_state.source(f"topics/{topic.key}")
    try:
        records = fetch_topic_records(
            topic,
            run_state.history.seen(topic.key),
            summarizer,
            source,
            limit=limit,
        )
    except Exception as exc:  # one topic must not abort the run
        source.fall_back(exc)
        previous = run_state.previous_topic(topic.key)[:limit]
        LOGGER.warning(
            "Topic fetch failed (%s), using %s previous entries: %s",
            topic.key,
            len(previous),
            exc,
            exc_info=True,
        )
        return previous

    run_state.history.record(topic.key, [r.pmid for r in records])
    return [r.to_dict() for r in records]
