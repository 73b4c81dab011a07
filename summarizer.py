"""Localized (Simplified Chinese) synopses for research records.

Two interchangeable strategies share one interface:

- ``HeuristicSummarizer``: keyword heuristics only, no network.
- ``TranslatedSummarizer``: same sentence selection plus a second
  "implication" sentence; both are machine-translated, degrading to an
  English excerpt when translation is unavailable.

The strategy is chosen once per run via ``build_summarizer``.
"""

from __future__ import annotations

import logging
import re

from translator import Translator

CORE_SENTENCE_MAX_CHARS = 260
IMPLICATION_SENTENCE_MAX_CHARS = 220
MIN_SENTENCE_CHARS = 30

LOGGER = logging.getLogger(__name__)

_CORE_KEYWORDS: tuple[str, ...] = (
    "significant",
    "improved",
    "reduced",
    "decreased",
    "associated",
    "risk",
    "effective",
    "conclusion",
    "suggest",
    "found",
    "predict",
)

_IMPLICATION_KEYWORDS: tuple[str, ...] = (
    "conclusion",
    "suggest",
    "indicate",
    "therefore",
    "may",
    "could",
    "associated",
    "predict",
)

# Checked in order; first match wins.
_METHOD_LABELS: tuple[tuple[str, str], ...] = (
    ("review", "综述研究"),
    ("multicenter", "多中心临床研究"),
    ("trial", "临床试验"),
    ("case", "病例研究"),
)
_DEFAULT_METHOD_LABEL = "临床研究"

_NO_CONCLUSION = "No abstract conclusion available."
_NO_IMPLICATION = "This study provides additional evidence for clinical evaluation."

_SAMPLE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(?:n\s*=\s*|enrolled\s+|included\s+|patients?\s*[:=]?\s*)(\d{2,5})\b", re.IGNORECASE),
    re.compile(r"\b(\d{2,5})\s+(?:patients?|participants?|subjects?)\b", re.IGNORECASE),
)
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")
_WHITESPACE_RE = re.compile(r"\s+")


def detect_method_label(study_type: str) -> str:
    lowered = (study_type or "").lower()
    for keyword, label in _METHOD_LABELS:
        if keyword in lowered:
            return label
    return _DEFAULT_METHOD_LABEL


def extract_sample_hint(text: str) -> str:
    """Return ``"样本量约为 N"`` for the first sample-size mention, else ``""``."""
    for pattern in _SAMPLE_PATTERNS:
        match = pattern.search(text or "")
        if match:
            return f"样本量约为 {match.group(1)}"
    return ""


def split_sentences(text: str) -> list[str]:
    """Split on sentence-ending punctuation; keep sentences longer than 30 chars."""
    normalized = _WHITESPACE_RE.sub(" ", text or "").strip()
    if not normalized:
        return []
    sentences = (s.strip() for s in _SENTENCE_SPLIT_RE.split(normalized))
    return [s for s in sentences if len(s) > MIN_SENTENCE_CHARS]


def _best_by_keywords(candidates: list[str], keywords: tuple[str, ...]) -> str | None:
    """Highest keyword-hit sentence; earliest wins ties; None if nothing hits."""
    best: str | None = None
    best_score = 0
    for sentence in candidates:
        lowered = sentence.lower()
        score = sum(1 for k in keywords if k in lowered)
        if score > best_score:
            best, best_score = sentence, score
    return best


def pick_core_sentence(title: str, abstract_text: str) -> str:
    candidates = split_sentences(abstract_text)
    best = _best_by_keywords(candidates, _CORE_KEYWORDS)
    if best:
        return best
    if candidates:
        return candidates[0]
    return title or _NO_CONCLUSION


def pick_implication_sentence(title: str, abstract_text: str, core_sentence: str) -> str:
    candidates = [s for s in split_sentences(abstract_text) if s != core_sentence]
    best = _best_by_keywords(candidates, _IMPLICATION_KEYWORDS)
    if best:
        return best
    if candidates:
        return candidates[0]
    return title or _NO_IMPLICATION


def _opening_sentence(topic_label: str, study_type: str, abstract_text: str) -> str:
    method = detect_method_label(study_type)
    sample = extract_sample_hint(abstract_text)
    sample_part = f"（{sample}）" if sample else ""
    return f"该文聚焦{topic_label}，属于{method}{sample_part}。"


class SummaryStrategy:
    """Interface shared by the summary strategies."""

    mode = "base"

    def summarize(self, topic_label: str, title: str, study_type: str, abstract_text: str) -> str:
        raise NotImplementedError


class HeuristicSummarizer(SummaryStrategy):
    mode = "heuristic"

    def summarize(self, topic_label: str, title: str, study_type: str, abstract_text: str) -> str:
        core = pick_core_sentence(title, abstract_text)[:CORE_SENTENCE_MAX_CHARS]
        return f"{_opening_sentence(topic_label, study_type, abstract_text)}核心发现：{core}"


class TranslatedSummarizer(SummaryStrategy):
    mode = "translated"

    def __init__(self, translator: Translator) -> None:
        self.translator = translator

    def summarize(self, topic_label: str, title: str, study_type: str, abstract_text: str) -> str:
        # Pick both sentences untruncated so the implication never repeats the core.
        core = pick_core_sentence(title, abstract_text)
        implication = pick_implication_sentence(title, abstract_text, core)
        core_zh = self.translator.translate(core[:CORE_SENTENCE_MAX_CHARS])
        implication_zh = self.translator.translate(implication[:IMPLICATION_SENTENCE_MAX_CHARS])
        return (
            f"{_opening_sentence(topic_label, study_type, abstract_text)}"
            f"核心观点：{core_zh} 临床提示：{implication_zh}"
        )


def build_summarizer(mode: str, translator: Translator | None = None) -> SummaryStrategy:
    """Return the strategy for *mode* (``"heuristic"`` or ``"translated"``)."""
    if mode == "heuristic":
        return HeuristicSummarizer()
    if mode == "translated":
        if translator is None:
            raise ValueError("Translated summary mode requires a translator")
        return TranslatedSummarizer(translator)
    raise ValueError(f"Unknown summary mode: {mode!r}")
