"""Publication-type pre-filter for primary research (no network calls)."""

from __future__ import annotations

from collections.abc import Iterable

# Publication types that are never primary research: corrections, commentary
# and notices. A single match excludes the record.
EXCLUDED_PUBTYPES: frozenset[str] = frozenset({
    "Published Erratum",
    "Comment",
    "Editorial",
    "Letter",
    "News",
})

MAX_STUDY_TYPE_TAGS = 3
UNSPECIFIED_STUDY_TYPE = "Not specified"


def is_primary_research(pubtypes: Iterable[str]) -> bool:
    """Return False if any publication type is in EXCLUDED_PUBTYPES."""
    return not any(p in EXCLUDED_PUBTYPES for p in pubtypes)


def study_type_label(pubtypes: list[str]) -> str:
    """Join the first three publication types, e.g. ``"Journal Article / Review"``."""
    tags = [p for p in pubtypes[:MAX_STUDY_TYPE_TAGS] if p]
    return " / ".join(tags) or UNSPECIFIED_STUDY_TYPE
