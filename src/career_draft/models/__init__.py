"""Data models for the career draft engine."""

from career_draft.models.draft import (
    CareerDraft,
    DraftContext,
    Location,
    QuestionGroup,
    Salary,
    Team,
    TeamMember,
    default_question_groups,
    normalize_groups,
)
from career_draft.models.question import (
    InterviewQuestion,
    PreScreenQuestion,
    QuestionOption,
    classify,
    normalize,
)

__all__ = [
    "CareerDraft",
    "DraftContext",
    "InterviewQuestion",
    "Location",
    "PreScreenQuestion",
    "QuestionGroup",
    "QuestionOption",
    "Salary",
    "Team",
    "TeamMember",
    "classify",
    "default_question_groups",
    "normalize_groups",
    "normalize",
]
