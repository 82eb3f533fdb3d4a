"""Per-step completeness and wizard navigation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from career_draft.engine.collection import interview_question_count
from career_draft.engine.notify import LoggingNotifier, Notifier
from career_draft.models.draft import CareerDraft, CareerStep
from career_draft.store.draft_store import DraftStore
from career_draft.utils.text import has_visible_text

logger = logging.getLogger(__name__)

REQUIRED_INTERVIEW_QUESTIONS = 5


@dataclass(frozen=True)
class Step:
    id: CareerStep
    title: str
    subtitle: str


STEPS: tuple[Step, ...] = (
    Step("career-details", "Career Details & Team Access", "Step 1"),
    Step("cv-screening", "CV Review & Pre-screening", "Step 2"),
    Step("ai-setup", "AI Interview Setup", "Step 3"),
    Step("pipeline", "Pipeline Stages", "Step 4"),
    Step("review", "Review Career", "Step 5"),
)
STEP_IDS: tuple[str, ...] = tuple(step.id for step in STEPS)

CAREER_DETAILS_INCOMPLETE = "Please complete all required career details"


def interview_threshold_notice(required: int) -> str:
    return f"Add at least {required} interview questions to continue"


def description_has_text(markup: str | None) -> bool:
    """True when the rich-text description has any visible text."""
    return has_visible_text(markup)


def _filled(value: str) -> bool:
    return bool(value and value.strip())


def is_step_complete(
    step: str,
    draft: CareerDraft,
    required_interview_questions: int = REQUIRED_INTERVIEW_QUESTIONS,
) -> bool:
    if step == "career-details":
        return (
            _filled(draft.job_title)
            and _filled(draft.employment_type)
            and _filled(draft.work_setup)
            and _filled(draft.location.province)
            and _filled(draft.location.city)
            and _filled(draft.salary.minimum)
            and _filled(draft.salary.maximum)
            and description_has_text(draft.description)
            and len(draft.team.members) > 0
        )
    if step in ("cv-screening", "pipeline"):
        return True
    if step == "ai-setup":
        return interview_question_count(draft.question_groups) >= required_interview_questions
    # review is terminal; unknown ids are never complete
    return False


def is_form_valid(
    draft: CareerDraft, required_interview_questions: int = REQUIRED_INTERVIEW_QUESTIONS
) -> bool:
    return (
        is_step_complete("career-details", draft)
        and is_step_complete("cv-screening", draft)
        and is_step_complete("ai-setup", draft, required_interview_questions)
    )


def first_incomplete_step(
    draft: CareerDraft, required_interview_questions: int = REQUIRED_INTERVIEW_QUESTIONS
) -> str | None:
    """First of the steps a published posting needs that is not complete yet."""
    for step in ("career-details", "cv-screening", "ai-setup"):
        if not is_step_complete(step, draft, required_interview_questions):
            return step
    return None


def can_navigate_to_step(
    target_index: int,
    current_index: int,
    draft: CareerDraft,
    required_interview_questions: int = REQUIRED_INTERVIEW_QUESTIONS,
) -> bool:
    """Backward moves are always allowed; forward ones need every earlier step complete."""
    if target_index <= current_index:
        return True
    return all(
        is_step_complete(step.id, draft, required_interview_questions)
        for step in STEPS[:target_index]
    )


class StepNavigator:
    """Moves the active step of a DraftStore through the wizard."""

    def __init__(
        self,
        store: DraftStore,
        notifier: Notifier | None = None,
        *,
        org_id: str | None = None,
        user_email: str | None = None,
        required_interview_questions: int = REQUIRED_INTERVIEW_QUESTIONS,
    ):
        self.store = store
        self.notifier = notifier or LoggingNotifier()
        self.org_id = org_id
        self.user_email = user_email
        self.required = required_interview_questions

    @property
    def current_step(self) -> str:
        return self.store.active_step

    @property
    def current_index(self) -> int:
        try:
            return STEP_IDS.index(self.store.active_step)
        except ValueError:
            return -1

    @property
    def progress_ratio(self) -> float:
        total = len(STEPS)
        index = self.current_index
        if total == 0 or index < 0:
            return 0.0
        if total == 1:
            return 1.0
        segments = total - 1
        ratio = index / segments
        if index < total - 1:
            ratio += 0.5 / segments
        return min(1.0, ratio)

    def is_complete(self, step: str) -> bool:
        return is_step_complete(step, self.store.draft, self.required)

    def _incomplete_notice(self, step: str) -> str | None:
        if step == "career-details":
            return CAREER_DETAILS_INCOMPLETE
        if step == "ai-setup":
            return interview_threshold_notice(self.required)
        return None

    def go_next(self) -> bool:
        """Advance one step when the current one is complete, persisting the draft."""
        index = self.current_index
        if index == -1 or index == len(STEPS) - 1:
            return False

        step = STEPS[index].id
        if not self.is_complete(step):
            notice = self._incomplete_notice(step)
            if notice:
                self.notifier.error(notice)
            return False

        self.store.set_active_step(STEPS[index + 1].id)
        self.store.persist({}, org_id=self.org_id, user_email=self.user_email)
        return True

    def go_previous(self) -> bool:
        index = self.current_index
        if index <= 0:
            return False
        self.store.set_active_step(STEPS[index - 1].id)
        return True

    def go_to(self, step: str) -> bool:
        if step not in STEP_IDS:
            raise ValueError(f"Unknown step: {step}")
        target = STEP_IDS.index(step)
        if not can_navigate_to_step(target, self.current_index, self.store.draft, self.required):
            logger.debug("Navigation to %s blocked from %s", step, self.current_step)
            return False
        self.store.set_active_step(step)
        return True
