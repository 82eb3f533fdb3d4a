"""Parse untrusted generation output and merge it into the question groups."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from career_draft.errors import PayloadParseError
from career_draft.models.draft import QuestionGroup, default_question_groups
from career_draft.models.question import InterviewQuestion
from career_draft.utils.json_parser import extract_balanced, looks_like_json, strip_code_fences
from career_draft.utils.text import (
    extract_question_text,
    normalize_category_name,
    normalize_question_text,
    split_plain_text_lines,
)

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


@dataclass
class IntegrationResult:
    groups: list[QuestionGroup]
    added_count: int


def _single_category(category_context: str | list[str] | None) -> str | None:
    if isinstance(category_context, list) and len(category_context) == 1:
        category_context = category_context[0]
    if isinstance(category_context, str) and category_context.strip():
        return category_context
    return None


def parse_payload(raw: Any, category_context: str | list[str] | None = None) -> Any:
    """Turn a generator response into a list of {category, questions} entries.

    Structured input passes through. Text is stripped of code fences and
    parsed as JSON, then scanned for a balanced array/object. As a last
    resort each non-empty line is taken as one question, which needs a single
    category name in ``category_context`` (a string or a one-item list) to
    file them under. Text that opens like JSON but never parses is rejected
    rather than read as lines, so a truncated batch is never half merged.

    Raises:
        PayloadParseError: nothing usable could be recovered.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise PayloadParseError("Empty response from question generator")

    if not isinstance(raw, str):
        return raw

    sanitized = strip_code_fences(raw)
    if not sanitized:
        raise PayloadParseError("Unable to parse generated questions")

    try:
        return json.loads(sanitized)
    except json.JSONDecodeError:
        pass

    recovered = extract_balanced(sanitized)
    if recovered is not None:
        return recovered

    lines = split_plain_text_lines(sanitized)
    if not lines or looks_like_json(sanitized):
        raise PayloadParseError("Generated questions are not valid JSON")

    category = _single_category(category_context)
    if category is not None:
        return [{"category": category, "questions": lines}]

    raise PayloadParseError("Unable to associate generated questions with a category context")


def _entry_questions(entry: Mapping) -> list:
    questions = entry.get("questions")
    if isinstance(questions, list):
        return questions
    if isinstance(questions, Mapping):
        return list(questions.values())
    return []


def integrate(groups: list[QuestionGroup], payload: Any) -> IntegrationResult:
    """Append generated interview questions to their category groups.

    Categories are matched on their normalized names; unknown categories are
    logged and skipped. A question whose normalized text already exists in
    the target group, or was accepted earlier in the same payload, is skipped.
    When nothing is added the original ``groups`` list is returned.
    """
    if isinstance(payload, list):
        entries = payload
    elif payload:
        entries = [payload]
    else:
        entries = []

    next_groups = [g.model_copy(deep=True) for g in groups] if groups else default_question_groups()
    added = 0

    for entry in entries:
        if not isinstance(entry, Mapping):
            logger.warning("Generated entry skipped (not an object): %r", entry)
            continue

        category = entry.get("category") if isinstance(entry.get("category"), str) else ""
        candidates = _entry_questions(entry)
        if not category or not candidates:
            continue

        key = normalize_category_name(category)
        group = next((g for g in next_groups if normalize_category_name(g.category) == key), None)
        if group is None:
            logger.warning("Generated questions skipped (unknown category %r)", category)
            continue

        lookup = {
            normalize_question_text(q.question) for q in group.questions if q.question.strip()
        }
        additions = []
        for candidate in candidates:
            text = extract_question_text(candidate)
            if not text:
                continue
            normalized = normalize_question_text(text)
            if normalized in lookup:
                continue
            lookup.add(normalized)
            additions.append(InterviewQuestion(question=text))

        if not additions:
            logger.info("No new questions for %r after de-duplication", category)
            continue

        group.questions.extend(additions)
        group.clamp_question_count()
        added += len(additions)

    if not added:
        return IntegrationResult(groups=groups, added_count=0)
    return IntegrationResult(groups=next_groups, added_count=added)
