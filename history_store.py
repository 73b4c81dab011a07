"""JSON-file history of PMIDs already emitted, per topic."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jsonio import read_json_safe, write_json_atomic

HISTORY_CAP = 1000

LOGGER = logging.getLogger(__name__)


class HistorySet:
    """Per-topic ordered, duplicate-free identifier lists (oldest first)."""

    def __init__(self, topics: dict[str, list[str]] | None = None) -> None:
        self.topics: dict[str, list[str]] = {}
        for key, ids in (topics or {}).items():
            self.topics[key] = _dedupe(ids)[-HISTORY_CAP:]

    def seen(self, topic_key: str) -> set[str]:
        return set(self.topics.get(topic_key, []))

    def is_empty(self) -> bool:
        return not any(self.topics.values())

    def record(self, topic_key: str, ids: Iterable[str]) -> None:
        """Append *ids*, drop duplicates (first occurrence wins), keep the newest HISTORY_CAP."""
        merged = _dedupe([*self.topics.get(topic_key, []), *ids])
        self.topics[topic_key] = merged[-HISTORY_CAP:]

    def to_dict(self) -> dict[str, list[str]]:
        return {key: list(ids) for key, ids in self.topics.items()}


class HistoryStore:
    """Loads and saves a HistorySet at *path*."""

    def __init__(self, path: Path, topic_keys: list[str]) -> None:
        self.path = path
        self.topic_keys = topic_keys

    def load(self, previous_snapshot: dict[str, Any] | None = None) -> HistorySet:
        """Return the persisted history, or an empty one if missing/corrupt.

        When every topic is empty the history is seeded from the PMIDs in
        *previous_snapshot* so that a fresh history file does not resurface
        records the display layer already shows.
        """
        raw = read_json_safe(self.path, {})
        stored = raw.get("topics") if isinstance(raw, dict) else None
        if not isinstance(stored, dict):
            stored = {}

        history = HistorySet({
            key: [str(i) for i in stored.get(key, []) if i] if isinstance(stored.get(key), list) else []
            for key in self.topic_keys
        })

        if history.is_empty() and previous_snapshot:
            snapshot_topics = previous_snapshot.get("topics") or {}
            for key in self.topic_keys:
                records = snapshot_topics.get(key) or []
                pmids = [str(r["pmid"]) for r in records if isinstance(r, dict) and r.get("pmid")]
                history.record(key, pmids)
            LOGGER.info(
                "History bootstrap from snapshot: %s",
                {key: len(ids) for key, ids in history.topics.items()},
            )

        return history

    def save(self, history: HistorySet, updated_at: str) -> None:
        write_json_atomic(self.path, {"updatedAt": updated_at, "topics": history.to_dict()})
        LOGGER.info("Wrote history to %s", self.path)


def _dedupe(ids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(ids))
