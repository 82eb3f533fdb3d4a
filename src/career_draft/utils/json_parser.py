"""Utilities to recover JSON from LLM responses."""

from __future__ import annotations

import json
import re

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove every markdown code fence marker from text."""
    return _FENCE_RE.sub("", text).strip()


def extract_balanced(text: str) -> dict | list | None:
    """Find the first balanced JSON array or object that parses.

    Arrays are tried before objects. For each opener, every position where
    the nesting depth returns to zero yields a candidate; the first candidate
    that parses wins. Brackets inside string literals are ignored. Text whose
    brackets never close (a truncated response) yields None.
    """
    for opener, closer in (("[", "]"), ("{", "}")):
        start = text.find(opener)
        if start == -1:
            continue
        for candidate in _balanced_candidates(text, start, opener, closer):
            try:
                return json.loads(candidate)
            except json.JSONDecodeError:
                continue
    return None


def _balanced_candidates(text: str, start: int, opener: str, closer: str):
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                yield text[start : index + 1]
            elif depth < 0:
                return


def looks_like_json(text: str) -> bool:
    """True when text opens like a JSON array or object."""
    return text.lstrip().startswith(("[", "{"))
