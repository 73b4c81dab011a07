"""Outbound HTTP with bounded retry and linear backoff."""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Literal

import requests

REQUEST_TIMEOUT_SECONDS = 20
MAX_ATTEMPTS = 3
BACKOFF_SECONDS = float(os.getenv("TRANSPORT_BACKOFF_SECONDS", "1.0"))
USER_AGENT = "clinical-digest/1.0"

LOGGER = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Raised once every attempt for a URL has failed."""


def fetch(url: str, expect: Literal["json", "text"] = "json") -> Any:
    """GET *url* and return the decoded body.

    Non-2xx statuses, network errors and undecodable JSON bodies are retried
    up to MAX_ATTEMPTS times, sleeping BACKOFF_SECONDS * attempt in between.
    The final attempt's error is chained onto the raised TransportError.
    """
    last_error: Exception | None = None

    for attempt in range(1, MAX_ATTEMPTS + 1):
        try:
            response = requests.get(
                url,
                headers={"User-Agent": USER_AGENT},
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            if expect == "json":
                return response.json()
            return response.text
        except (requests.RequestException, ValueError) as exc:
            last_error = exc
            LOGGER.warning(
                "Request failed on attempt %s/%s: url=%s error=%s",
                attempt,
                MAX_ATTEMPTS,
                url,
                exc,
            )
            if attempt >= MAX_ATTEMPTS:
                break
            time.sleep(BACKOFF_SECONDS * attempt)

    raise TransportError(f"Request failed after {MAX_ATTEMPTS} attempts: {url}") from last_error


def fetch_json(url: str) -> Any:
    return fetch(url, expect="json")


def fetch_text(url: str) -> str:
    return fetch(url, expect="text")
