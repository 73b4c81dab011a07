from __future__ import annotations

import json
from pathlib import Path

import pytest

from history_store import HISTORY_CAP, HistorySet, HistoryStore

TOPIC_KEYS = ["htn_kidney", "portal_hypertension"]


@pytest.fixture
def store(tmp_path: Path) -> HistoryStore:
    return HistoryStore(tmp_path / "research-history.json", TOPIC_KEYS)


def test_record_dedupes_and_keeps_first_position() -> None:
    history = HistorySet({"t": ["1", "2", "3"]})
    history.record("t", ["2", "4", "4"])
    assert history.topics["t"] == ["1", "2", "3", "4"]


def test_record_caps_to_most_recent_entries() -> None:
    history = HistorySet({"t": [str(i) for i in range(990)]})
    history.record("t", [str(i) for i in range(985, 1020)])

    ids = history.topics["t"]
    assert len(ids) == HISTORY_CAP == 1000
    assert len(set(ids)) == len(ids)
    assert ids[0] == "20"  # oldest evicted first
    assert ids[-1] == "1019"


def test_constructor_normalizes_loaded_lists() -> None:
    history = HistorySet({"t": ["a", "a", "b"]})
    assert history.topics["t"] == ["a", "b"]


def test_load_missing_file_is_empty(store: HistoryStore) -> None:
    history = store.load()
    assert history.topics == {"htn_kidney": [], "portal_hypertension": []}


def test_load_corrupt_file_starts_fresh(store: HistoryStore) -> None:
    store.path.write_text("{not json", encoding="utf-8")
    history = store.load()
    assert history.is_empty()


def test_load_existing_history(store: HistoryStore) -> None:
    store.path.write_text(
        json.dumps({"updatedAt": "x", "topics": {"htn_kidney": ["1", "2"], "portal_hypertension": ["9"]}}),
        encoding="utf-8",
    )
    history = store.load()
    assert history.seen("htn_kidney") == {"1", "2"}
    assert history.seen("portal_hypertension") == {"9"}


def test_bootstrap_from_previous_snapshot_when_history_empty(store: HistoryStore) -> None:
    snapshot = {
        "topics": {
            "htn_kidney": [{"pmid": "100"}, {"pmid": "101"}, {"title": "no pmid"}],
            "portal_hypertension": [{"pmid": "200"}],
        }
    }
    history = store.load(previous_snapshot=snapshot)
    assert history.topics["htn_kidney"] == ["100", "101"]
    assert history.topics["portal_hypertension"] == ["200"]


def test_no_bootstrap_when_any_topic_has_history(store: HistoryStore) -> None:
    store.path.write_text(json.dumps({"topics": {"htn_kidney": ["1"]}}), encoding="utf-8")
    snapshot = {"topics": {"portal_hypertension": [{"pmid": "200"}]}}

    history = store.load(previous_snapshot=snapshot)
    assert history.topics["portal_hypertension"] == []


def test_save_writes_expected_shape(store: HistoryStore) -> None:
    history = HistorySet({"htn_kidney": ["1"], "portal_hypertension": []})
    history.record("htn_kidney", ["2", "1"])
    store.save(history, updated_at="2026-10-19T00:00:00+00:00")

    data = json.loads(store.path.read_text(encoding="utf-8"))
    assert data == {
        "updatedAt": "2026-10-19T00:00:00+00:00",
        "topics": {"htn_kidney": ["1", "2"], "portal_hypertension": []},
    }
