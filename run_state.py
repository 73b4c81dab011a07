"""Per-run state: source progress tracking and the data each ingester shares."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from history_store import HistorySet

LOGGER = logging.getLogger(__name__)


class SourceState(str, Enum):
    """Lifecycle of one topic or news category within a run."""

    PENDING = "pending"
    FETCHING = "fetching"
    PARSING = "parsing"
    FILTERING = "filtering"
    DONE = "done"
    FALLBACK = "fallback"


# Allowed forward moves; any non-terminal state may drop to FALLBACK.
_TRANSITIONS: dict[SourceState, frozenset[SourceState]] = {
    SourceState.PENDING: frozenset({SourceState.FETCHING}),
    SourceState.FETCHING: frozenset({SourceState.PARSING, SourceState.DONE}),
    SourceState.PARSING: frozenset({SourceState.FILTERING}),
    SourceState.FILTERING: frozenset({SourceState.DONE}),
    SourceState.DONE: frozenset(),
    SourceState.FALLBACK: frozenset(),
}
_TERMINAL = frozenset({SourceState.DONE, SourceState.FALLBACK})


@dataclass
class SourceRun:
    """State machine for a single source key (e.g. ``topics/htn_kidney``)."""

    key: str
    state: SourceState = SourceState.PENDING
    error: str | None = None

    def advance(self, new_state: SourceState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid transition for {self.key}: {self.state.value} -> {new_state.value}")
        LOGGER.debug("Source %s: %s -> %s", self.key, self.state.value, new_state.value)
        self.state = new_state

    def fall_back(self, exc: BaseException) -> None:
        if self.state in _TERMINAL:
            raise RuntimeError(f"Source {self.key} already finished in state {self.state.value}")
        self.error = f"{type(exc).__name__}: {exc}"
        LOGGER.debug("Source %s: %s -> fallback", self.key, self.state.value)
        self.state = SourceState.FALLBACK


@dataclass
class RunState:
    """Everything one pipeline run reads and writes, passed explicitly."""

    history: HistorySet
    previous_snapshot: dict[str, Any]
    sources: dict[str, SourceRun] = field(default_factory=dict)

    def source(self, key: str) -> SourceRun:
        """Return a fresh SourceRun registered under *key*."""
        run = SourceRun(key=key)
        self.sources[key] = run
        return run

    def previous_topic(self, topic_key: str) -> list[dict[str, Any]]:
        topics = self.previous_snapshot.get("topics") or {}
        entries = topics.get(topic_key) if isinstance(topics, dict) else None
        return list(entries) if isinstance(entries, list) else []

    def previous_news(self, category: str) -> list[dict[str, Any]]:
        news = self.previous_snapshot.get("news") or {}
        entries = news.get(category) if isinstance(news, dict) else None
        return list(entries) if isinstance(entries, list) else []

    def failed_sources(self) -> list[str]:
        return [key for key, run in self.sources.items() if run.state is SourceState.FALLBACK]
