"""Add, update, remove and reorder operations over the question groups.

Every operation takes the current list of groups and returns an
``EditResult`` holding a new list. Input groups are never mutated: an
operation works on a deep copy and hands back the caller's original list
when nothing was applied.

The first group is the pre-screen group. Interview questions may live in
any group, the first one included, so interview operations address groups by
id and only ever touch interview-kind items.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from career_draft.models.draft import QuestionGroup, default_question_groups
from career_draft.models.question import (
    ANSWER_TYPES,
    CHOICE_ANSWER_TYPES,
    InterviewQuestion,
    PreScreenQuestion,
    QuestionOption,
    is_interview,
    is_pre_screen,
)
from career_draft.utils.text import normalize_question_text

EMPTY_QUESTION = "Question cannot be empty"
DUPLICATE_PRE_SCREEN = "Pre-screening question already added"
DUPLICATE_INTERVIEW = "Question already exists in this category"
LAST_OPTION = "A choice question needs at least one option"

QUESTION_ADDED = "Question added"
CUSTOM_QUESTION_ADDED = "Custom question added"
QUESTION_UPDATED = "Question updated"
QUESTION_DELETED = "Question deleted"

Question = PreScreenQuestion | InterviewQuestion


@dataclass
class EditResult:
    """Outcome of one edit.

    ``applied`` is False both for rejections (``notice`` set) and for edits
    that referenced a missing group or question (``notice`` is None).
    """

    groups: list[QuestionGroup]
    applied: bool
    notice: str | None = None
    question_id: str | None = None

    @property
    def rejected(self) -> bool:
        return not self.applied and self.notice is not None


def clone_groups(groups: Iterable[QuestionGroup]) -> list[QuestionGroup]:
    return [group.model_copy(deep=True) for group in groups]


def _working_copy(groups: list[QuestionGroup]) -> list[QuestionGroup]:
    return clone_groups(groups) if groups else default_question_groups()


def _unchanged(groups: list[QuestionGroup]) -> EditResult:
    return EditResult(groups=groups, applied=False)


def _reject(groups: list[QuestionGroup], notice: str) -> EditResult:
    return EditResult(groups=groups, applied=False, notice=notice)


def _find_group(groups: list[QuestionGroup], group_id: int) -> QuestionGroup | None:
    for group in groups:
        if group.id == group_id:
            return group
    return None


def _index_of(questions: list[Question], question_id: str) -> int:
    key = str(question_id)
    for index, question in enumerate(questions):
        if question.id == key:
            return index
    return -1


def _find_choice_question(groups: list[QuestionGroup], question_id: str) -> PreScreenQuestion | None:
    if not groups:
        return None
    questions = groups[0].questions
    index = _index_of(questions, question_id)
    if index == -1:
        return None
    question = questions[index]
    if not is_pre_screen(question) or not question.is_choice:
        return None
    return question


def _has_duplicate(
    questions: Iterable[Question], text: str, exclude_id: str | None = None
) -> bool:
    key = normalize_question_text(text)
    return any(
        normalize_question_text(q.question) == key and q.id != exclude_id for q in questions
    )


def _check_answer_type(answer_type: str) -> None:
    if answer_type not in ANSWER_TYPES:
        raise ValueError(f"Unknown answer type: {answer_type}")


# --- derived views ---------------------------------------------------------


def pre_screen_questions(groups: list[QuestionGroup]) -> list[PreScreenQuestion]:
    if not groups:
        return []
    return [q for q in groups[0].questions if is_pre_screen(q)]


def interview_questions(group: QuestionGroup) -> list[InterviewQuestion]:
    return [q for q in group.questions if is_interview(q)]


def interview_groups(groups: list[QuestionGroup]) -> list[tuple[QuestionGroup, list[InterviewQuestion]]]:
    return [(group, interview_questions(group)) for group in groups]


def interview_question_count(groups: list[QuestionGroup]) -> int:
    return sum(group.interview_count for group in groups)


# --- pre-screen questions --------------------------------------------------


def add_pre_screen_question(
    groups: list[QuestionGroup],
    text: str,
    answer_type: str | None = None,
    options: Iterable[str] | None = None,
    range_defaults: Mapping[str, str] | None = None,
) -> EditResult:
    """Append a pre-screen question built from text and optional template values."""
    trimmed = text.strip()
    if not trimmed:
        return _reject(groups, EMPTY_QUESTION)

    if _has_duplicate(pre_screen_questions(groups), trimmed):
        return _reject(groups, DUPLICATE_PRE_SCREEN)

    answer_type = answer_type or "dropdown"
    _check_answer_type(answer_type)

    choice_options: list[QuestionOption] = []
    if answer_type in CHOICE_ANSWER_TYPES:
        choice_options = [QuestionOption(label=label) for label in options or ()]
        if not choice_options:
            choice_options = [QuestionOption(label="")]

    range_min = range_max = ""
    if answer_type == "range" and range_defaults:
        range_min = range_defaults.get("min") or ""
        range_max = range_defaults.get("max") or ""

    question = PreScreenQuestion(
        question=trimmed,
        answer_type=answer_type,
        options=choice_options,
        range_min=range_min,
        range_max=range_max,
    )
    next_groups = _working_copy(groups)
    next_groups[0].questions.append(question)
    return EditResult(next_groups, True, QUESTION_ADDED, question_id=question.id)


def add_custom_pre_screen_question(groups: list[QuestionGroup]) -> EditResult:
    """Append a blank short-text question for the user to fill in."""
    question = PreScreenQuestion(question="", answer_type="short_text")
    next_groups = _working_copy(groups)
    next_groups[0].questions.append(question)
    return EditResult(next_groups, True, CUSTOM_QUESTION_ADDED, question_id=question.id)


def update_pre_screen_question(
    groups: list[QuestionGroup],
    question_id: str,
    question: str | None = None,
    answer_type: str | None = None,
) -> EditResult:
    """Change the text and/or answer type, resetting the answer shape on a type switch."""
    if not groups or (question is None and answer_type is None):
        return _unchanged(groups)
    if answer_type is not None:
        _check_answer_type(answer_type)

    next_groups = clone_groups(groups)
    questions = next_groups[0].questions
    index = _index_of(questions, question_id)
    if index == -1 or not is_pre_screen(questions[index]):
        return _unchanged(groups)

    target = questions[index]
    if question is not None:
        target.question = question

    if answer_type is not None:
        if answer_type in CHOICE_ANSWER_TYPES:
            target.options = target.options or [QuestionOption(label="")]
            target.range_min = ""
            target.range_max = ""
        elif answer_type == "range":
            target.options = []
        else:
            target.options = []
            target.range_min = ""
            target.range_max = ""
        target.answer_type = answer_type

    return EditResult(next_groups, True, question_id=target.id)


def update_pre_screen_range(
    groups: list[QuestionGroup], question_id: str, key: str, value: str
) -> EditResult:
    attribute = {"rangeMin": "range_min", "rangeMax": "range_max"}.get(key, key)
    if attribute not in ("range_min", "range_max"):
        raise ValueError(f"Unknown range bound: {key}")
    if not groups:
        return _unchanged(groups)

    next_groups = clone_groups(groups)
    questions = next_groups[0].questions
    index = _index_of(questions, question_id)
    if index == -1:
        return _unchanged(groups)
    target = questions[index]
    if not is_pre_screen(target) or target.answer_type != "range":
        return _unchanged(groups)

    setattr(target, attribute, value)
    return EditResult(next_groups, True, question_id=target.id)


def remove_pre_screen_question(groups: list[QuestionGroup], question_id: str) -> EditResult:
    if not groups:
        return _unchanged(groups)
    next_groups = clone_groups(groups)
    questions = next_groups[0].questions
    index = _index_of(questions, question_id)
    if index == -1 or not is_pre_screen(questions[index]):
        return _unchanged(groups)
    del questions[index]
    return EditResult(next_groups, True, QUESTION_DELETED, question_id=str(question_id))


# --- choice options --------------------------------------------------------


def add_option(groups: list[QuestionGroup], question_id: str) -> EditResult:
    next_groups = clone_groups(groups)
    target = _find_choice_question(next_groups, question_id)
    if target is None:
        return _unchanged(groups)
    target.options.append(QuestionOption(label=f"Option {len(target.options) + 1}"))
    return EditResult(next_groups, True, question_id=target.id)


def update_option(
    groups: list[QuestionGroup], question_id: str, option_id: str, label: str
) -> EditResult:
    next_groups = clone_groups(groups)
    target = _find_choice_question(next_groups, question_id)
    if target is None:
        return _unchanged(groups)
    for option in target.options:
        if option.id == option_id:
            option.label = label
            return EditResult(next_groups, True, question_id=target.id)
    return _unchanged(groups)


def remove_option(groups: list[QuestionGroup], question_id: str, option_id: str) -> EditResult:
    next_groups = clone_groups(groups)
    target = _find_choice_question(next_groups, question_id)
    if target is None:
        return _unchanged(groups)
    remaining = [option for option in target.options if option.id != option_id]
    if len(remaining) == len(target.options):
        return _unchanged(groups)
    if not remaining:
        return _reject(groups, LAST_OPTION)
    target.options = remaining
    return EditResult(next_groups, True, question_id=target.id)


# --- interview questions ---------------------------------------------------


def add_interview_question(groups: list[QuestionGroup], group_id: int, text: str) -> EditResult:
    trimmed = text.strip()
    if not trimmed:
        return _reject(groups, EMPTY_QUESTION)

    next_groups = _working_copy(groups)
    group = _find_group(next_groups, group_id)
    if group is None:
        return _unchanged(groups)
    if _has_duplicate(group.questions, trimmed):
        return _reject(groups, DUPLICATE_INTERVIEW)

    question = InterviewQuestion(question=trimmed)
    group.questions.append(question)
    group.clamp_question_count()
    return EditResult(next_groups, True, QUESTION_ADDED, question_id=question.id)


def update_interview_question(
    groups: list[QuestionGroup], group_id: int, question_id: str, text: str
) -> EditResult:
    trimmed = text.strip()
    if not trimmed:
        return _reject(groups, EMPTY_QUESTION)

    next_groups = clone_groups(groups)
    group = _find_group(next_groups, group_id)
    if group is None:
        return _unchanged(groups)
    index = _index_of(group.questions, question_id)
    if index == -1 or not is_interview(group.questions[index]):
        return _unchanged(groups)
    if _has_duplicate(group.questions, trimmed, exclude_id=str(question_id)):
        return _reject(groups, DUPLICATE_INTERVIEW)

    group.questions[index].question = trimmed
    return EditResult(next_groups, True, QUESTION_UPDATED, question_id=str(question_id))


def remove_interview_question(
    groups: list[QuestionGroup], group_id: int, question_id: str
) -> EditResult:
    next_groups = clone_groups(groups)
    group = _find_group(next_groups, group_id)
    if group is None:
        return _unchanged(groups)
    index = _index_of(group.questions, question_id)
    if index == -1 or not is_interview(group.questions[index]):
        return _unchanged(groups)
    del group.questions[index]
    group.clamp_question_count()
    return EditResult(next_groups, True, QUESTION_DELETED, question_id=str(question_id))


def remove_question(groups: list[QuestionGroup], question_id: str) -> EditResult:
    """Remove a question from whichever group holds it."""
    next_groups = clone_groups(groups)
    for group in next_groups:
        index = _index_of(group.questions, question_id)
        if index == -1:
            continue
        removed = group.questions.pop(index)
        if is_interview(removed):
            group.clamp_question_count()
        return EditResult(next_groups, True, QUESTION_DELETED, question_id=removed.id)
    return _unchanged(groups)


def set_question_count_to_ask(
    groups: list[QuestionGroup], group_id: int, count: int | None
) -> EditResult:
    next_groups = clone_groups(groups)
    group = _find_group(next_groups, group_id)
    if group is None:
        return _unchanged(groups)
    group.question_count_to_ask = None if count is None else max(0, min(count, group.interview_count))
    return EditResult(next_groups, True)


# --- reordering ------------------------------------------------------------


def _move(items: list[Question], source_id: str, target_id: str | None) -> list[Question] | None:
    """Directional move shared by both reorder operations.

    Returns the reordered list, or None when the source is missing. The
    insertion side depends on where the source sat relative to the target
    before the move: coming from above it lands after the target, coming
    from below it lands before it.
    """
    original_ids = [item.id for item in items]
    if source_id not in original_ids:
        return None

    source_index = original_ids.index(source_id)
    result = list(items)
    moved = result.pop(source_index)

    if target_id is None or target_id not in original_ids:
        result.append(moved)
        return result

    target_original = original_ids.index(target_id)
    target_now = next(i for i, item in enumerate(result) if item.id == target_id)
    if source_index < target_original:
        result.insert(target_now + 1, moved)
    else:
        result.insert(target_now, moved)
    return result


def _reorder_slots(group: QuestionGroup, kind, source_id: str, target_id: str | None) -> bool:
    # Items of one kind are permuted among the positions they already occupy.
    slots = [i for i, q in enumerate(group.questions) if kind(q)]
    items = [group.questions[i] for i in slots]
    reordered = _move(items, source_id, target_id)
    if reordered is None or [q.id for q in reordered] == [q.id for q in items]:
        return False
    for slot, question in zip(slots, reordered):
        group.questions[slot] = question
    return True


def reorder_pre_screen(
    groups: list[QuestionGroup], source_id: str, target_id: str | None
) -> EditResult:
    """Move a pre-screen question onto another one, or to the end when target is None.

    Interview questions sharing the pre-screen group keep their positions.
    """
    if not source_id or not groups or source_id == target_id:
        return _unchanged(groups)

    next_groups = clone_groups(groups)
    if not _reorder_slots(next_groups[0], is_pre_screen, source_id, target_id):
        return _unchanged(groups)
    return EditResult(next_groups, True, question_id=source_id)


def reorder_interview(
    groups: list[QuestionGroup], group_id: int, source_id: str, target_id: str | None
) -> EditResult:
    """Reorder interview questions of one group.

    Only interview items move; any pre-screen item in the group keeps its slot.
    """
    if not source_id or source_id == target_id:
        return _unchanged(groups)

    next_groups = clone_groups(groups)
    group = _find_group(next_groups, group_id)
    if group is None or not _reorder_slots(group, is_interview, source_id, target_id):
        return _unchanged(groups)
    return EditResult(next_groups, True, question_id=source_id)
