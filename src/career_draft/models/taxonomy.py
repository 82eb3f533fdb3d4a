"""Fixed interview category taxonomy and suggested pre-screening questions."""

from __future__ import annotations

from dataclasses import dataclass, field

PRE_SCREEN_GROUP_ID = 1

INTERVIEW_CATEGORIES: dict[str, str] = {
    "CV Validation / Experience": (
        "Questions that verify the candidate's CV claims: past roles, scope of "
        "responsibility, tenure and concrete outcomes of previous work."
    ),
    "Technical": (
        "Questions that probe the hard skills, tools and domain knowledge the "
        "role requires, including how the candidate applies them in practice."
    ),
    "Behavioral": (
        "Questions about past behaviour in real situations: teamwork, conflict, "
        "ownership, communication and handling pressure."
    ),
    "Analytical": (
        "Questions that test reasoning and problem solving: breaking down an "
        "unfamiliar problem, weighing trade-offs and using data to decide."
    ),
    "Others": (
        "Questions on motivation, culture fit, career goals and any role "
        "specific topic not covered by the other categories."
    ),
}


@dataclass(frozen=True)
class SuggestedQuestion:
    label: str
    prompt: str
    answer_type: str = "dropdown"
    default_options: tuple[str, ...] = ()
    range_defaults: dict[str, str] = field(default_factory=dict)


SUGGESTED_PRE_SCREENING_QUESTIONS: tuple[SuggestedQuestion, ...] = (
    SuggestedQuestion(
        label="Notice Period",
        prompt="How long is your notice period?",
        answer_type="dropdown",
        default_options=("Immediately", "< 30 days", "> 30 days"),
    ),
    SuggestedQuestion(
        label="Work Setup",
        prompt="How often are you willing to report to the office each week?",
        answer_type="dropdown",
        default_options=("Fully remote", "1-2 days", "3+ days"),
    ),
    SuggestedQuestion(
        label="Asking Salary",
        prompt="How much is your expected monthly salary?",
        answer_type="range",
    ),
)


def find_suggested_question(label: str) -> SuggestedQuestion | None:
    key = label.strip().lower()
    for suggestion in SUGGESTED_PRE_SCREENING_QUESTIONS:
        if suggestion.label.lower() == key:
            return suggestion
    return None
