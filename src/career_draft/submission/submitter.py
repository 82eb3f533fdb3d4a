"""Create or update a posting from the current draft."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Literal

from career_draft.clients.career_api import CareerApiClient
from career_draft.engine.notify import LoggingNotifier, Notifier
from career_draft.errors import SubmissionError
from career_draft.store.draft_store import DraftStore
from career_draft.submission.payload import format_career_payload
from career_draft.validation.steps import (
    CAREER_DETAILS_INCOMPLETE,
    REQUIRED_INTERVIEW_QUESTIONS,
    first_incomplete_step,
    interview_threshold_notice,
)

logger = logging.getLogger(__name__)

FormType = Literal["add", "edit"]

SALARY_RANGE_INVALID = "Minimum salary cannot exceed maximum salary"
MISSING_ORGANIZATION = "Missing organization context"
SAVE_FAILED = "Failed to save career"


class CareerSubmitter:
    """Sends the draft to the career endpoints.

    In ``add`` mode a successful save resets the draft; in ``edit`` mode the
    draft is kept and stamped with the saved status. A failed save keeps the
    draft untouched so it can be retried. Only one save runs at a time.
    """

    def __init__(
        self,
        store: DraftStore,
        api: CareerApiClient,
        notifier: Notifier | None = None,
        *,
        form_type: FormType = "add",
        org_id: str | None = None,
        user: Mapping[str, Any] | None = None,
        career: Mapping[str, Any] | None = None,
        required_interview_questions: int = REQUIRED_INTERVIEW_QUESTIONS,
    ):
        self.store = store
        self.api = api
        self.notifier = notifier or LoggingNotifier()
        self.form_type = form_type
        self.org_id = org_id
        self.user = user or {}
        self.career = career
        self.required = required_interview_questions
        self._saving = False

    @property
    def is_saving(self) -> bool:
        return self._saving

    def _blocking_step(self) -> str | None:
        step = first_incomplete_step(self.store.draft, self.required)
        if step is None:
            return None
        self.store.set_active_step(step)
        if step == "career-details":
            self.notifier.error(CAREER_DETAILS_INCOMPLETE)
        elif step == "ai-setup":
            self.notifier.error(interview_threshold_notice(self.required))
        return step

    async def save(self, status: str) -> dict[str, Any] | None:
        """Save the draft with ``status``. Returns the endpoint response, or None if refused."""
        if not status or self._saving:
            return None

        # Publishing needs every required step; drafts can be saved half done.
        if status == "active" and self._blocking_step() is not None:
            return None

        payload = format_career_payload(
            self.store.draft, status, self.org_id, self.user, self.career
        )
        minimum, maximum = payload["minimumSalary"], payload["maximumSalary"]
        if minimum is not None and maximum is not None and minimum > maximum:
            self.notifier.error(SALARY_RANGE_INVALID)
            return None

        if not self.org_id:
            self.notifier.error(MISSING_ORGANIZATION)
            return None

        user_email = self.user.get("email")
        self._saving = True
        try:
            if self.form_type == "add":
                response = await self.api.create_career(payload)
                self.store.persist({"status": "draft"}, org_id=self.org_id, user_email=user_email)
                self.notifier.success(
                    "Career added and published" if status == "active" else "Career added"
                )
                self.store.reset()
            else:
                response = await self.api.update_career(payload)
                self.store.persist({"status": status}, org_id=self.org_id, user_email=user_email)
                self.notifier.success("Career updated")
        except SubmissionError:
            logger.error("Failed to save career", exc_info=True)
            self.notifier.error(SAVE_FAILED)
            raise
        finally:
            self._saving = False
        return response
