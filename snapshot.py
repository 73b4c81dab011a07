"""Snapshot assembly and persistence (snapshot + history written together)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from history_store import HistorySet, HistoryStore
from jsonio import read_json_safe, write_json_atomic

LOGGER = logging.getLogger(__name__)


class SnapshotWriteError(RuntimeError):
    """Raised when the snapshot or the history file cannot be written."""


def empty_snapshot() -> dict[str, Any]:
    return {"generatedAt": "", "topics": {}, "news": {}}


def load_previous_snapshot(path: Path) -> dict[str, Any]:
    """Return the last written snapshot, or an empty skeleton if missing/corrupt."""
    data = read_json_safe(path, None)
    if not isinstance(data, dict):
        return empty_snapshot()
    snapshot = empty_snapshot()
    snapshot.update(data)
    if not isinstance(snapshot.get("topics"), dict):
        snapshot["topics"] = {}
    if not isinstance(snapshot.get("news"), dict):
        snapshot["news"] = {}
    return snapshot


def utc_timestamp() -> str:
    return datetime.now(UTC).isoformat()


def build_snapshot(
    topics: dict[str, list[dict[str, Any]]],
    news: dict[str, list[dict[str, Any]]],
    generated_at: str | None = None,
) -> dict[str, Any]:
    return {
        "generatedAt": generated_at or utc_timestamp(),
        "topics": topics,
        "news": news,
    }


def write_outputs(
    snapshot: dict[str, Any],
    history: HistorySet,
    snapshot_path: Path,
    history_store: HistoryStore,
) -> None:
    """Persist the snapshot, then the history, as one logical unit.

    Each file is replaced atomically. If the history write fails after the
    snapshot was written, the snapshot is not rolled back.
    """
    try:
        write_json_atomic(snapshot_path, snapshot)
        LOGGER.info("Wrote snapshot to %s", snapshot_path)
        history_store.save(history, updated_at=snapshot["generatedAt"])
    except (OSError, TypeError, ValueError) as exc:
        LOGGER.exception("Failed to persist snapshot/history: %s", exc)
        raise SnapshotWriteError(f"Failed to persist run outputs: {exc}") from exc
