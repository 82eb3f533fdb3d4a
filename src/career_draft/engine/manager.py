"""Question operations bound to a draft store and a notifier."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from career_draft.engine import collection
from career_draft.engine.collection import EditResult
from career_draft.engine.drag import PRE_SCREEN_LIST, DragScope, DragSession
from career_draft.engine.notify import LoggingNotifier, Notifier
from career_draft.generation.integrator import integrate
from career_draft.models.draft import QuestionGroup
from career_draft.models.question import InterviewQuestion, PreScreenQuestion
from career_draft.models.taxonomy import SuggestedQuestion
from career_draft.store.draft_store import DraftStore

logger = logging.getLogger(__name__)


class QuestionManager:
    """Applies collection edits to the stored draft.

    Each call reads the groups from the store at call time, so a result is
    never computed from a stale copy. Applied edits are written back through
    ``DraftStore.update``; notices go to the notifier.
    """

    def __init__(self, store: DraftStore, notifier: Notifier | None = None):
        self.store = store
        self.notifier = notifier or LoggingNotifier()
        self.drag = DragSession(self._reorder_from_drag)

    @property
    def groups(self) -> list[QuestionGroup]:
        return self.store.question_groups

    @property
    def pre_screen_questions(self) -> list[PreScreenQuestion]:
        return collection.pre_screen_questions(self.groups)

    @property
    def interview_groups(self) -> list[tuple[QuestionGroup, list[InterviewQuestion]]]:
        return collection.interview_groups(self.groups)

    @property
    def interview_question_count(self) -> int:
        return collection.interview_question_count(self.groups)

    def _apply(self, result: EditResult) -> EditResult:
        if result.applied:
            self.store.update({"question_groups": result.groups})
            if result.notice:
                self.notifier.success(result.notice)
        elif result.rejected:
            self.notifier.error(result.notice)
        return result

    # pre-screen

    def add_pre_screen_question(
        self,
        text: str,
        answer_type: str | None = None,
        options: Iterable[str] | None = None,
        range_defaults: Mapping[str, str] | None = None,
    ) -> EditResult:
        return self._apply(
            collection.add_pre_screen_question(
                self.groups, text, answer_type, options, range_defaults
            )
        )

    def add_suggested_question(self, suggestion: SuggestedQuestion) -> EditResult:
        return self.add_pre_screen_question(
            suggestion.prompt,
            suggestion.answer_type,
            suggestion.default_options,
            suggestion.range_defaults,
        )

    def add_custom_pre_screen_question(self) -> EditResult:
        return self._apply(collection.add_custom_pre_screen_question(self.groups))

    def update_pre_screen_question(
        self, question_id: str, question: str | None = None, answer_type: str | None = None
    ) -> EditResult:
        return self._apply(
            collection.update_pre_screen_question(self.groups, question_id, question, answer_type)
        )

    def update_pre_screen_range(self, question_id: str, key: str, value: str) -> EditResult:
        return self._apply(collection.update_pre_screen_range(self.groups, question_id, key, value))

    def remove_pre_screen_question(self, question_id: str) -> EditResult:
        if self.drag.state.question_id == question_id:
            self.drag.end()
        return self._apply(collection.remove_pre_screen_question(self.groups, question_id))

    def add_option(self, question_id: str) -> EditResult:
        return self._apply(collection.add_option(self.groups, question_id))

    def update_option(self, question_id: str, option_id: str, label: str) -> EditResult:
        return self._apply(collection.update_option(self.groups, question_id, option_id, label))

    def remove_option(self, question_id: str, option_id: str) -> EditResult:
        return self._apply(collection.remove_option(self.groups, question_id, option_id))

    def reorder_pre_screen(self, source_id: str, target_id: str | None) -> EditResult:
        return self._apply(collection.reorder_pre_screen(self.groups, source_id, target_id))

    # interview

    def add_interview_question(self, group_id: int, text: str) -> EditResult:
        return self._apply(collection.add_interview_question(self.groups, group_id, text))

    def update_interview_question(self, group_id: int, question_id: str, text: str) -> EditResult:
        return self._apply(
            collection.update_interview_question(self.groups, group_id, question_id, text)
        )

    def remove_interview_question(self, group_id: int, question_id: str) -> EditResult:
        return self._apply(collection.remove_interview_question(self.groups, group_id, question_id))

    def remove_question(self, question_id: str) -> EditResult:
        return self._apply(collection.remove_question(self.groups, question_id))

    def set_question_count_to_ask(self, group_id: int, count: int | None) -> EditResult:
        return self._apply(collection.set_question_count_to_ask(self.groups, group_id, count))

    def reorder_interview(self, group_id: int, source_id: str, target_id: str | None) -> EditResult:
        return self._apply(
            collection.reorder_interview(self.groups, group_id, source_id, target_id)
        )

    # generation

    def integrate_generated(self, payload: Any) -> int:
        """Merge a parsed generation payload; returns how many questions were added."""
        result = integrate(self.groups, payload)
        if result.added_count:
            self.store.update({"question_groups": result.groups})
        return result.added_count

    def _reorder_from_drag(self, scope: DragScope, source_id: str, target_id: str | None) -> None:
        if scope == PRE_SCREEN_LIST:
            self.reorder_pre_screen(source_id, target_id)
        else:
            self.reorder_interview(int(scope), source_id, target_id)
