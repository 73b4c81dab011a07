import pytest

from filters import is_primary_research, study_type_label


@pytest.mark.parametrize("pubtypes", [
    ["Editorial"],
    ["Journal Article", "Comment"],
    ["Letter"],
    ["Published Erratum"],
    ["News", "Journal Article"],
])
def test_excluded_types_are_not_primary_research(pubtypes: list[str]) -> None:
    assert is_primary_research(pubtypes) is False


@pytest.mark.parametrize("pubtypes", [
    ["Journal Article"],
    ["Randomized Controlled Trial", "Multicenter Study"],
    ["Review", "Systematic Review"],
    [],
])
def test_research_types_pass(pubtypes: list[str]) -> None:
    assert is_primary_research(pubtypes) is True


def test_matching_is_exact_not_substring() -> None:
    """'Comment' excludes, but 'Commentary Reply Study' is not in the set."""
    assert is_primary_research(["Commentary Reply Study"]) is True


def test_study_type_label_keeps_first_three() -> None:
    label = study_type_label(["Journal Article", "Review", "Multicenter Study", "Meta-Analysis"])
    assert label == "Journal Article / Review / Multicenter Study"


def test_study_type_label_default() -> None:
    assert study_type_label([]) == "Not specified"
