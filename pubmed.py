"""PubMed E-utilities access and tolerant parsing of efetch XML."""

from __future__ import annotations

import logging
import re
from typing import Any
from urllib.parse import quote

from markup import strip_markup
from transport import fetch_json, fetch_text

PUBMED_BASE = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
PUBMED_ARTICLE_URL = "https://pubmed.ncbi.nlm.nih.gov/{pmid}/"
DOI_URL = "https://doi.org/{doi}"
LANGUAGE_FILTER = "english[Language]"

LOGGER = logging.getLogger(__name__)

_ARTICLE_RE = re.compile(r"<PubmedArticle>(.*?)</PubmedArticle>", re.DOTALL)
_PMID_RE = re.compile(r"<PMID[^>]*>\s*(\d+)\s*</PMID>")
_ABSTRACT_TEXT_RE = re.compile(r"<AbstractText\b[^>]*>(.*?)</AbstractText>", re.DOTALL)
_DOI_RE = re.compile(r"\bdoi:\s*([^\s;]+)", re.IGNORECASE)


def build_search_url(query: str, retmax: int) -> str:
    term = f"{query} AND {LANGUAGE_FILTER}"
    return (
        f"{PUBMED_BASE}/esearch.fcgi?db=pubmed&retmode=json&sort=pub+date"
        f"&retmax={retmax}&term={quote(term, safe='')}"
    )


def build_summary_url(ids: list[str]) -> str:
    return f"{PUBMED_BASE}/esummary.fcgi?db=pubmed&retmode=json&id={quote(','.join(ids), safe='')}"


def build_fetch_url(ids: list[str]) -> str:
    return f"{PUBMED_BASE}/efetch.fcgi?db=pubmed&retmode=xml&id={quote(','.join(ids), safe='')}"


def search_ids(query: str, retmax: int) -> list[str]:
    """Return candidate PMIDs for *query*, newest publication first."""
    payload = fetch_json(build_search_url(query, retmax))
    result = payload.get("esearchresult") if isinstance(payload, dict) else None
    ids = result.get("idlist") if isinstance(result, dict) else None
    if not isinstance(ids, list):
        return []
    return [str(pmid) for pmid in ids if pmid]


def fetch_summaries(ids: list[str]) -> dict[str, dict[str, Any]]:
    """Return esummary metadata keyed by PMID; unknown shapes yield ``{}``."""
    payload = fetch_json(build_summary_url(ids))
    result = payload.get("result") if isinstance(payload, dict) else None
    if not isinstance(result, dict):
        return {}
    return {pmid: item for pmid, item in result.items() if pmid != "uids" and isinstance(item, dict)}


def fetch_abstract_xml(ids: list[str]) -> str:
    """Return the raw efetch XML for *ids*; parse it with ``parse_abstract_map``."""
    return fetch_text(build_fetch_url(ids))


def parse_abstract_map(xml_text: str) -> dict[str, str]:
    """Map each PMID in an efetch batch to its concatenated abstract text.

    Articles without a PMID are skipped. Articles without AbstractText
    segments map to an empty string. A malformed article block only loses
    its own contribution.
    """
    abstracts: dict[str, str] = {}
    for match in _ARTICLE_RE.finditer(xml_text or ""):
        block = match.group(1)
        pmid_match = _PMID_RE.search(block)
        if not pmid_match:
            LOGGER.debug("Skipping PubmedArticle block without PMID")
            continue
        segments = (strip_markup(m.group(1)) for m in _ABSTRACT_TEXT_RE.finditer(block))
        abstracts[pmid_match.group(1)] = " ".join(s for s in segments if s)
    return abstracts


def parse_doi(elocation_id: str | None) -> str | None:
    """Extract a DOI from an esummary ``elocationid`` string."""
    match = _DOI_RE.search(elocation_id or "")
    return match.group(1) if match else None


def pubmed_url(pmid: str) -> str:
    return PUBMED_ARTICLE_URL.format(pmid=pmid)


def doi_url(doi: str | None) -> str:
    return DOI_URL.format(doi=doi) if doi else ""
