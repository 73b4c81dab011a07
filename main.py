"""CLI entrypoint for the daily research + news digest pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

import config
from history_store import HistoryStore
from news_ingester import ingest_news_category
from run_state import RunState
from snapshot import SnapshotWriteError, build_snapshot, load_previous_snapshot, write_outputs
from summarizer import build_summarizer
from topic_ingester import ingest_topic
from translator import build_translator


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Refresh the PubMed + news snapshot")
    parser.add_argument(
        "--summary-mode",
        choices=["heuristic", "translated"],
        default=config.SUMMARY_MODE,
        help="Research summary strategy for the whole run (default: SUMMARY_MODE env or 'translated')",
    )
    parser.add_argument(
        "--translation-backend",
        choices=["google", "openai", "claude"],
        default=config.TRANSLATION_BACKEND,
        help="Backend used for news localization and translated summaries",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding latest.json and research-history.json (default: DIGEST_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and summarize but do not write any files",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def run(
    data_dir: Path,
    summary_mode: str,
    translation_backend: str,
    dry_run: bool = False,
) -> int:
    """Run one full ingestion cycle and return the process exit status."""
    snapshot_path = data_dir / config.SNAPSHOT_FILENAME
    history_store = HistoryStore(data_dir / config.HISTORY_FILENAME, [t.key for t in config.TOPICS])

    previous = load_previous_snapshot(snapshot_path)
    run_state = RunState(history=history_store.load(previous), previous_snapshot=previous)

    translator = build_translator(translation_backend)
    summarizer = build_summarizer(summary_mode, translator)
    logging.info("Run start: summary_mode=%s translation_backend=%s data_dir=%s",
                 summary_mode, translation_backend, data_dir)

    topics = {topic.key: ingest_topic(topic, run_state, summarizer) for topic in config.TOPICS}
    news = {category: ingest_news_category(category, run_state, translator) for category in config.NEWS_FEEDS}

    snapshot = build_snapshot(topics, news)
    failed = run_state.failed_sources()
    logging.info(
        "Ingestion complete: topics=%s news=%s fallback_sources=%s",
        {key: len(v) for key, v in topics.items()},
        {key: len(v) for key, v in news.items()},
        failed or "none",
    )

    if dry_run:
        logging.info("[dry-run] Skipping writes to %s", data_dir)
        return 0

    try:
        write_outputs(snapshot, run_state.history, snapshot_path, history_store)
    except SnapshotWriteError:
        logging.error("Run failed: outputs could not be persisted")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Initialize config and execute the pipeline."""
    load_dotenv()
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        return run(
            data_dir=args.data_dir or config.data_dir(),
            summary_mode=args.summary_mode,
            translation_backend=args.translation_backend,
            dry_run=args.dry_run,
        )
    except Exception:
        logging.exception("Failed to update content")
        return 1


if __name__ == "__main__":
    sys.exit(main())
