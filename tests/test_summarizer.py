from __future__ import annotations

import pytest

from summarizer import (
    CORE_SENTENCE_MAX_CHARS,
    HeuristicSummarizer,
    TranslatedSummarizer,
    build_summarizer,
    detect_method_label,
    extract_sample_hint,
    pick_core_sentence,
    pick_implication_sentence,
    split_sentences,
)
from translator import Translator, fallback_translation

_ABSTRACT = (
    "Portal hypertension drives most complications of cirrhosis in adults. "
    "We enrolled 245 patients across eight hospitals between 2019 and 2023. "
    "Carvedilol significantly reduced the risk of first variceal bleeding. "
    "These findings suggest that early beta-blockade may improve outcomes."
)


class _EchoTranslator(Translator):
    name = "echo"

    def __init__(self) -> None:
        self.calls: list[str] = []

    def _translate(self, text: str) -> str:
        self.calls.append(text)
        return f"[zh]{text}"


class _BrokenTranslator(Translator):
    name = "broken"

    def _translate(self, text: str) -> str:
        raise RuntimeError("endpoint down")


@pytest.mark.parametrize("study_type, expected", [
    ("Journal Article / Review", "综述研究"),
    ("Multicenter Study / Journal Article", "多中心临床研究"),
    ("Randomized Controlled Trial", "临床试验"),
    ("Case Reports", "病例研究"),
    ("Journal Article", "临床研究"),
    ("", "临床研究"),
])
def test_detect_method_label(study_type: str, expected: str) -> None:
    assert detect_method_label(study_type) == expected


def test_sample_hint_from_enrolled_phrase() -> None:
    assert "245" in extract_sample_hint("Investigators enrolled 245 patients.")


def test_sample_hint_from_count_before_noun() -> None:
    assert extract_sample_hint("A cohort of 1200 participants was followed.") == "样本量约为 1200"


def test_sample_hint_empty_without_numbers() -> None:
    assert extract_sample_hint("No numeric mention of cohort size here.") == ""


def test_split_sentences_drops_short_fragments() -> None:
    sentences = split_sentences("Short one. " + _ABSTRACT)
    assert "Short one." not in sentences
    assert len(sentences) == 4


def test_core_sentence_prefers_result_keywords() -> None:
    assert pick_core_sentence("Title", _ABSTRACT).startswith("Carvedilol significantly reduced")


def test_core_sentence_falls_back_to_title() -> None:
    assert pick_core_sentence("Fallback title", "") == "Fallback title"


def test_implication_sentence_is_distinct_from_core() -> None:
    core = pick_core_sentence("Title", _ABSTRACT)
    implication = pick_implication_sentence("Title", _ABSTRACT, core)

    assert implication != core
    assert implication.startswith("These findings suggest")


def test_heuristic_summary_contains_topic_method_and_sample() -> None:
    summary = HeuristicSummarizer().summarize(
        topic_label="门静脉高压症",
        title="Carvedilol in cirrhosis",
        study_type="Randomized Controlled Trial",
        abstract_text=_ABSTRACT,
    )
    assert summary.startswith("该文聚焦门静脉高压症，属于临床试验（样本量约为 245）。")
    assert "Carvedilol significantly reduced" in summary


@pytest.mark.parametrize("strategy", [HeuristicSummarizer(), TranslatedSummarizer(_BrokenTranslator())])
def test_never_empty_without_abstract(strategy) -> None:
    summary = strategy.summarize(
        topic_label="高血压肾病",
        title="Renal outcomes in hypertension",
        study_type="Not specified",
        abstract_text="",
    )
    assert summary
    assert "Renal outcomes in hypertension" in summary


def test_translated_summary_uses_translator_for_both_sentences() -> None:
    translator = _EchoTranslator()
    summary = TranslatedSummarizer(translator).summarize(
        topic_label="门静脉高压症",
        title="Carvedilol in cirrhosis",
        study_type="Journal Article",
        abstract_text=_ABSTRACT,
    )

    assert len(translator.calls) == 2
    assert "核心观点：[zh]Carvedilol significantly reduced" in summary
    assert "临床提示：[zh]These findings suggest" in summary


def test_translated_summary_degrades_to_excerpt() -> None:
    summary = TranslatedSummarizer(_BrokenTranslator()).summarize(
        topic_label="门静脉高压症",
        title="T",
        study_type="Journal Article",
        abstract_text=_ABSTRACT,
    )
    core = pick_core_sentence("T", _ABSTRACT)
    assert fallback_translation(core) in summary


def test_translated_summary_long_core_is_not_reused_as_implication() -> None:
    long_core = (
        "Higher portal pressure was significantly associated with mortality, and the data suggest "
        "that hepatic venous pressure gradient may predict decompensation, variceal bleeding, "
        "ascites, hepatic encephalopathy, renal dysfunction and liver transplantation in adults "
        "with compensated advanced chronic liver disease followed for a median of five years."
    )
    assert len(long_core) > CORE_SENTENCE_MAX_CHARS
    abstract = f"{long_core} Routine measurement could guide beta-blocker therapy."
    translator = _EchoTranslator()

    summary = TranslatedSummarizer(translator).summarize(
        topic_label="门静脉高压症",
        title="HVPG and outcomes",
        study_type="Journal Article",
        abstract_text=abstract,
    )

    assert translator.calls == [
        long_core[:CORE_SENTENCE_MAX_CHARS],
        "Routine measurement could guide beta-blocker therapy.",
    ]
    assert "临床提示：[zh]Routine measurement could guide" in summary


def test_build_summarizer_modes() -> None:
    assert isinstance(build_summarizer("heuristic"), HeuristicSummarizer)
    assert isinstance(build_summarizer("translated", _EchoTranslator()), TranslatedSummarizer)
    with pytest.raises(ValueError):
        build_summarizer("translated")
    with pytest.raises(ValueError):
        build_summarizer("llm")
