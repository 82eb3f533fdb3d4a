"""Text normalization helpers shared by the question engine and generator."""

from __future__ import annotations

import re
from typing import Any

_TAG_RE = re.compile(r"<[^>]+>")
_SLASH_RE = re.compile(r"\s*/\s*")
_WHITESPACE_RE = re.compile(r"\s+")
_LINE_SPLIT_RE = re.compile(r"\r?\n|•|\*")
_LIST_PREFIX_RE = re.compile(r"^[\d\-\.\)\s]+")


def normalize_question_text(value: str) -> str:
    """Key used for duplicate detection: trimmed and lowercased."""
    return value.strip().lower()


def normalize_category_name(value: str) -> str:
    """Canonical category key.

    "CV Validation/Experience", "cv validation /  experience" and
    "CV Validation / Experience" all map to "cv validation / experience".
    """
    lowered = _SLASH_RE.sub(" / ", value.lower())
    return _WHITESPACE_RE.sub(" ", lowered).strip()


def strip_tags(markup: str | None, replacement: str = " ") -> str:
    """Remove HTML tags from rich-text markup and trim the result."""
    if not markup:
        return ""
    return _TAG_RE.sub(replacement, markup).strip()


def has_visible_text(markup: str | None) -> bool:
    return bool(strip_tags(markup, replacement=""))


def extract_question_text(entry: Any) -> str:
    """Pull the question text out of a generated entry.

    Strings are used directly. Objects are searched for ``question``,
    ``text`` and ``prompt`` keys, then for the first string value.
    """
    if isinstance(entry, str):
        return entry.strip()

    if isinstance(entry, dict):
        for key in ("question", "text", "prompt"):
            if isinstance(entry.get(key), str):
                return entry[key].strip()
        for value in entry.values():
            if isinstance(value, str):
                return value.strip()

    return ""


def split_plain_text_lines(text: str) -> list[str]:
    """Split free text into list items, dropping bullets and numbering."""
    items = []
    for line in _LINE_SPLIT_RE.split(text):
        cleaned = _LIST_PREFIX_RE.sub("", line).strip()
        if cleaned:
            items.append(cleaned)
    return items
