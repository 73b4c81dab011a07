"""Pipeline configuration: topics, feeds, limits and file locations."""

from __future__ import annotations

import os
from pathlib import Path

from models import FeedSource, Topic

TOPICS: list[Topic] = [
    Topic(
        key="htn_kidney",
        query=(
            '("hypertensive nephropathy"[Title/Abstract] OR '
            '"hypertensive kidney disease"[Title/Abstract] OR '
            '"hypertension-related chronic kidney disease"[Title/Abstract])'
        ),
        label_zh="高血压肾病",
    ),
    Topic(
        key="portal_hypertension",
        query=(
            '("portal hypertension"[Title/Abstract] OR '
            '"portopulmonary hypertension"[Title/Abstract] OR '
            '"hepatic venous pressure gradient"[Title/Abstract])'
        ),
        label_zh="门静脉高压症",
    ),
]

NEWS_FEEDS: dict[str, list[FeedSource]] = {
    "world": [
        FeedSource(source="Reuters", url="https://feeds.reuters.com/reuters/worldNews"),
        FeedSource(source="BBC", url="https://feeds.bbci.co.uk/news/world/rss.xml"),
    ],
    "finance": [
        FeedSource(source="Reuters", url="https://feeds.reuters.com/reuters/businessNews"),
        FeedSource(source="BBC", url="https://feeds.bbci.co.uk/news/business/rss.xml"),
    ],
}

#: Category label used in the one-line news synopsis.
NEWS_CATEGORY_LABELS: dict[str, str] = {
    "world": "世界时事",
    "finance": "金融市场",
}

PAPER_LIMIT = int(os.getenv("PAPER_LIMIT", "5"))
NEWS_LIMIT = int(os.getenv("NEWS_LIMIT", "5"))
SEARCH_RETMAX = int(os.getenv("SEARCH_RETMAX", "40"))

# "heuristic" or "translated"; chosen once per run, never per record.
SUMMARY_MODE = os.getenv("SUMMARY_MODE", "translated")
# "google", "openai" or "claude".
TRANSLATION_BACKEND = os.getenv("TRANSLATION_BACKEND", "google")

# Resolved against the working directory.
_DEFAULT_DATA_DIR = Path("data")
SNAPSHOT_FILENAME = "latest.json"
HISTORY_FILENAME = "research-history.json"


def data_dir() -> Path:
    """Return the output directory, honouring DIGEST_DATA_DIR if set."""
    env = os.getenv("DIGEST_DATA_DIR")
    return Path(env) if env else _DEFAULT_DATA_DIR
