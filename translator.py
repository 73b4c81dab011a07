"""English to Simplified Chinese translation backends.

Every backend exposes ``translate(text) -> str`` which never raises: an
unavailable backend or an empty result degrades to a short excerpt of the
original English text.
"""

from __future__ import annotations

import logging
import os
from typing import Any
from urllib.parse import quote

import anthropic
from openai import OpenAI

from transport import fetch_json

GOOGLE_TRANSLATE_URL = (
    "https://translate.googleapis.com/translate_a/single?client=gtx&sl=en&tl=zh-CN&dt=t&q={text}"
)
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-5.2")
FALLBACK_EXCERPT_CHARS = 80

LOGGER = logging.getLogger(__name__)

_LLM_SYSTEM_PROMPT = (
    "Translate the user's English text into Simplified Chinese. "
    "Reply with the translation only, no quotes, no commentary."
)


def fallback_translation(text: str) -> str:
    """Non-network stand-in used when a translation backend fails."""
    return f"英文原文摘录：{text[:FALLBACK_EXCERPT_CHARS]}..."


class Translator:
    """Base class; subclasses implement ``_translate``."""

    name = "base"

    def translate(self, text: str) -> str:
        if not text:
            return ""
        try:
            translated = self._translate(text).strip()
        except Exception as exc:  # any backend failure degrades to the excerpt
            LOGGER.warning("Translation via %s failed, using excerpt: %s", self.name, exc)
            return fallback_translation(text)
        if not translated:
            LOGGER.warning("Translation via %s returned empty text, using excerpt", self.name)
            return fallback_translation(text)
        return translated

    def _translate(self, text: str) -> str:
        raise NotImplementedError


class GoogleTranslator(Translator):
    """Public Google Translate endpoint, called through the retrying transport."""

    name = "google"

    def _translate(self, text: str) -> str:
        data = fetch_json(GOOGLE_TRANSLATE_URL.format(text=quote(text, safe="")))
        return _join_google_segments(data)


class OpenAITranslator(Translator):
    name = "openai"

    def __init__(self) -> None:
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY environment variable is required")
        self._client = OpenAI(api_key=api_key)

    def _translate(self, text: str) -> str:
        response = self._client.chat.completions.create(
            model=OPENAI_MODEL,
            temperature=0,
            messages=[
                {"role": "system", "content": _LLM_SYSTEM_PROMPT},
                {"role": "user", "content": text},
            ],
        )
        return response.choices[0].message.content or ""


class ClaudeTranslator(Translator):
    name = "claude"

    def __init__(self) -> None:
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise RuntimeError("ANTHROPIC_API_KEY environment variable is required")
        self._client = anthropic.Anthropic(api_key=api_key)
        self._model = os.getenv("CLAUDE_MODEL", "claude-haiku-4-5")

    def _translate(self, text: str) -> str:
        response = self._client.messages.create(
            model=self._model,
            max_tokens=512,
            system=_LLM_SYSTEM_PROMPT,
            messages=[{"role": "user", "content": text}],
        )
        return response.content[0].text


_BACKENDS: dict[str, type[Translator]] = {
    "google": GoogleTranslator,
    "openai": OpenAITranslator,
    "claude": ClaudeTranslator,
}


def build_translator(backend: str) -> Translator:
    """Instantiate the named backend; raises ValueError for unknown names."""
    try:
        cls = _BACKENDS[backend]
    except KeyError:
        raise ValueError(f"Unknown translation backend: {backend!r}") from None
    LOGGER.info("Using translation backend=%s", backend)
    return cls()


def _join_google_segments(data: Any) -> str:
    """Concatenate the translated segments of a ``translate_a/single`` reply."""
    if not isinstance(data, list) or not data or not isinstance(data[0], list):
        return ""
    parts = [seg[0] for seg in data[0] if isinstance(seg, list) and seg and isinstance(seg[0], str)]
    return "".join(parts)
