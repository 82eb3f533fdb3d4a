"""Question variants and the classification rules for stored question records.

A question is either a pre-screen question (structured answer: free text,
choices or a numeric range) or an interview question (free-text prompt).
Records that reach the engine from storage or from a generation payload are
untagged dicts in camelCase; ``normalize`` is the single place where such a
record is classified and turned into one of the two models.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

PRE_SCREEN = "pre-screen"
INTERVIEW = "interview"

QuestionOrigin = Literal["pre-screen", "interview"]
AnswerType = Literal["short_text", "long_text", "dropdown", "checkboxes", "range"]

ANSWER_TYPES: tuple[str, ...] = ("short_text", "long_text", "dropdown", "checkboxes", "range")
CHOICE_ANSWER_TYPES: tuple[str, ...] = ("dropdown", "checkboxes")

# Fields that only a pre-screen record carries, as (wire name, attribute name).
_PRE_SCREEN_KEYS = (
    ("answerType", "answer_type"),
    ("options", "options"),
    ("rangeMin", "range_min"),
    ("rangeMax", "range_max"),
)


def new_id() -> str:
    return str(uuid.uuid4())


class QuestionOption(BaseModel):
    id: str = Field(default_factory=new_id)
    label: str = ""


class PreScreenQuestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id)
    origin: Literal["pre-screen"] = PRE_SCREEN
    question: str = ""
    answer_type: AnswerType = Field(default="short_text", alias="answerType")
    options: list[QuestionOption] = Field(default_factory=list)
    range_min: str = Field(default="", alias="rangeMin")
    range_max: str = Field(default="", alias="rangeMax")

    @property
    def is_choice(self) -> bool:
        return self.answer_type in CHOICE_ANSWER_TYPES


class InterviewQuestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_id)
    origin: Literal["interview"] = INTERVIEW
    question: str = ""


Question = Annotated[Union[PreScreenQuestion, InterviewQuestion], Field(discriminator="origin")]


def _lookup(data: Mapping, wire: str, attr: str) -> Any:
    if wire in data:
        return data[wire]
    return data.get(attr)


def classify(record: Any) -> QuestionOrigin:
    """Resolve which variant a stored record belongs to.

    An explicit ``origin`` tag wins. Otherwise any of ``answerType`` (string),
    ``options`` (list), ``rangeMin`` or ``rangeMax`` (string) marks a
    pre-screen question. Everything else, including non-mapping input, is an
    interview question.
    """
    if isinstance(record, (PreScreenQuestion, InterviewQuestion)):
        return record.origin
    if not isinstance(record, Mapping):
        return INTERVIEW

    declared = record.get("origin")
    if declared in (PRE_SCREEN, INTERVIEW):
        return declared

    answer_type = _lookup(record, "answerType", "answer_type")
    options = record.get("options")
    range_min = _lookup(record, "rangeMin", "range_min")
    range_max = _lookup(record, "rangeMax", "range_max")
    if (
        isinstance(answer_type, str)
        or isinstance(options, list)
        or isinstance(range_min, str)
        or isinstance(range_max, str)
    ):
        return PRE_SCREEN

    return INTERVIEW


def _normalize_option(option: Any, index: int) -> QuestionOption:
    if isinstance(option, QuestionOption):
        return option.model_copy()
    if isinstance(option, Mapping):
        option_id = option.get("id")
        label = option.get("label")
        return QuestionOption(
            id=str(option_id) if option_id not in (None, "") else new_id(),
            label=label if isinstance(label, str) else "",
        )
    if isinstance(option, str):
        return QuestionOption(label=option)
    return QuestionOption(label=f"Option {index + 1}")


def normalize(record: Any) -> PreScreenQuestion | InterviewQuestion:
    """Turn any stored or generated record into a tagged question model.

    Assigns an id when missing, attaches the resolved origin and fills the
    variant defaults. Interview questions lose any stray answer type,
    options or range fields. ``normalize(normalize(q)) == normalize(q)``.
    """
    if isinstance(record, (PreScreenQuestion, InterviewQuestion)):
        return record.model_copy(deep=True)

    data: Mapping = record if isinstance(record, Mapping) else {}
    origin = classify(data)

    question_id = data.get("id")
    question_id = str(question_id) if question_id not in (None, "") else new_id()

    text = data.get("question")
    if not isinstance(text, str) or not text.strip():
        for key in ("text", "prompt"):
            if isinstance(data.get(key), str):
                text = data[key]
                break
    if not isinstance(text, str):
        text = ""

    if origin == INTERVIEW:
        return InterviewQuestion(id=question_id, question=text)

    answer_type = _lookup(data, "answerType", "answer_type")
    if answer_type not in ANSWER_TYPES:
        answer_type = "short_text"

    raw_options = data.get("options")
    options = (
        [_normalize_option(option, i) for i, option in enumerate(raw_options)]
        if isinstance(raw_options, list)
        else []
    )
    range_min = _lookup(data, "rangeMin", "range_min")
    range_max = _lookup(data, "rangeMax", "range_max")

    return PreScreenQuestion(
        id=question_id,
        question=text,
        answer_type=answer_type,
        options=options,
        range_min=range_min if isinstance(range_min, str) else "",
        range_max=range_max if isinstance(range_max, str) else "",
    )


def is_pre_screen(question: PreScreenQuestion | InterviewQuestion) -> bool:
    return question.origin == PRE_SCREEN


def is_interview(question: PreScreenQuestion | InterviewQuestion) -> bool:
    return question.origin == INTERVIEW
