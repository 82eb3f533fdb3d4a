"""Holds the posting draft, merges partial updates and writes them through.

Every field of ``CareerDraft`` has an explicit merge policy. Scalars are
overwritten, ``salary`` and ``location`` merge key by key, ``question_groups``
and ``context`` are replaced whole, and ``team`` replaces its member list when
one is supplied.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any, get_args

from pydantic import BaseModel, ValidationError

from career_draft.models.draft import (
    DEFAULT_STEP,
    CareerDraft,
    CareerStep,
    DraftContext,
    Location,
    QuestionGroup,
    Salary,
    Team,
    default_question_groups,
)
from career_draft.store.storage import KeyValueStorage, MemoryStorage

logger = logging.getLogger(__name__)

DRAFT_STORAGE_KEY = "jia-segmented-career-draft"
STEP_STORAGE_KEY = "jia-segmented-career-step"


class MergePolicy(str, Enum):
    OVERWRITE = "overwrite"
    MERGE_KEYS = "merge_keys"
    REPLACE = "replace"
    REPLACE_MEMBERS = "replace_members"


MERGE_POLICY: dict[str, MergePolicy] = {
    "job_title": MergePolicy.OVERWRITE,
    "description": MergePolicy.OVERWRITE,
    "screening_setting": MergePolicy.OVERWRITE,
    "employment_type": MergePolicy.OVERWRITE,
    "work_setup": MergePolicy.OVERWRITE,
    "work_setup_remarks": MergePolicy.OVERWRITE,
    "cv_secret_prompt": MergePolicy.OVERWRITE,
    "ai_interview_secret_prompt": MergePolicy.OVERWRITE,
    "require_video": MergePolicy.OVERWRITE,
    "status": MergePolicy.OVERWRITE,
    "salary": MergePolicy.MERGE_KEYS,
    "location": MergePolicy.MERGE_KEYS,
    "question_groups": MergePolicy.REPLACE,
    "context": MergePolicy.REPLACE,
    "team": MergePolicy.REPLACE_MEMBERS,
}


def _field_name(model: type[BaseModel], key: str) -> str:
    if key in model.model_fields:
        return key
    for name, info in model.model_fields.items():
        if info.alias == key:
            return name
    raise ValueError(f"Unknown {model.__name__} field: {key}")


def _merge_keys(current: BaseModel, value: Any) -> BaseModel:
    model = type(current)
    if isinstance(value, BaseModel):
        supplied = value.model_dump(exclude_unset=True)
    elif isinstance(value, Mapping):
        supplied = {_field_name(model, k): v for k, v in value.items()}
    else:
        raise ValueError(f"{model.__name__} update must be a mapping")
    return model.model_validate({**current.model_dump(), **supplied})


def _replace_members(current: Team, value: Any) -> Team:
    if isinstance(value, Team):
        members = value.members
    elif isinstance(value, Mapping):
        if "members" not in value or value["members"] is None:
            return current
        members = value["members"]
    else:
        raise ValueError("team update must be a mapping")
    return Team.model_validate({"members": list(members)})


def merge_draft(previous: CareerDraft, update: Mapping[str, Any]) -> CareerDraft:
    """Apply a partial update according to MERGE_POLICY.

    The result is fully validated before it is returned; on error the
    previous draft is untouched.
    """
    fields: dict[str, Any] = {name: getattr(previous, name) for name in CareerDraft.model_fields}

    for key, value in update.items():
        name = _field_name(CareerDraft, key)
        policy = MERGE_POLICY[name]
        if policy is MergePolicy.MERGE_KEYS:
            fields[name] = _merge_keys(fields[name], value)
        elif policy is MergePolicy.REPLACE_MEMBERS:
            fields[name] = _replace_members(fields[name], value)
        else:
            fields[name] = value

    return CareerDraft.model_validate(fields)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _number_to_text(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def _currency_code(career: Mapping[str, Any]) -> str:
    for key in ("salaryCurrency", "currency"):
        value = career.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip().upper()
    return "PHP"


class DraftStore:
    """Single source of truth for one user's in-progress posting."""

    def __init__(self, storage: KeyValueStorage | None = None):
        self.storage = storage if storage is not None else MemoryStorage()
        self._draft = self._read()

    def _read(self) -> CareerDraft:
        raw = self.storage.get(DRAFT_STORAGE_KEY)
        if raw is None:
            return CareerDraft()
        try:
            return CareerDraft.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding unreadable persisted draft", exc_info=True)
            return CareerDraft()

    def _commit(self, draft: CareerDraft) -> CareerDraft:
        # Write first so a failing storage leaves the in-memory draft as it was.
        self.storage.set(DRAFT_STORAGE_KEY, draft.to_storage())
        self._draft = draft
        return draft

    @property
    def draft(self) -> CareerDraft:
        """Current draft. Treat as read-only; change it through update()."""
        return self._draft

    @property
    def question_groups(self) -> list[QuestionGroup]:
        return self._draft.question_groups

    def update(self, partial: Mapping[str, Any]) -> CareerDraft:
        """Merge a partial update into the draft and persist it."""
        return self._commit(merge_draft(self._draft, partial))

    def persist(
        self,
        partial: Mapping[str, Any] | None = None,
        *,
        org_id: str | None = None,
        user_email: str | None = None,
    ) -> CareerDraft:
        """Update plus provenance stamping, used on step changes and after saving."""
        merged = merge_draft(self._draft, partial or {})
        context = merged.context.model_copy(
            update={
                **({"org_id": org_id} if org_id else {}),
                **({"last_persisted_by": user_email} if user_email else {}),
                "last_persisted_at": _now_iso(),
            }
        )
        return self._commit(merged.model_copy(update={"context": context}))

    def reset(self) -> CareerDraft:
        draft = self._commit(CareerDraft())
        self.set_active_step(DEFAULT_STEP)
        return draft

    def load_for_org(self, org_id: str | None) -> CareerDraft:
        """Drop a persisted draft that belongs to a different organization."""
        if not org_id:
            return self._draft
        recorded = self._draft.context.org_id
        if not recorded or recorded == org_id:
            return self._draft
        logger.info("Discarding draft of organization %s for %s", recorded, org_id)
        return self._commit(CareerDraft())

    @property
    def active_step(self) -> CareerStep:
        step = self.storage.get(STEP_STORAGE_KEY, DEFAULT_STEP)
        if step not in get_args(CareerStep):
            return DEFAULT_STEP
        return step

    def set_active_step(self, step: CareerStep) -> None:
        if step not in get_args(CareerStep):
            raise ValueError(f"Unknown step: {step}")
        self.storage.set(STEP_STORAGE_KEY, step)

    def hydrate_from_career(
        self,
        career: Mapping[str, Any],
        question_groups: list[QuestionGroup] | list[dict] | None = None,
    ) -> CareerDraft:
        """Replace the whole draft with a stored posting (edit mode)."""
        team = career.get("team")
        members = career.get("teamMembers")
        if not isinstance(members, list):
            members = team.get("members") if isinstance(team, Mapping) else None
        last_edited_by = career.get("lastEditedBy")

        draft = CareerDraft(
            job_title=career.get("jobTitle") or "",
            description=career.get("description") or "",
            screening_setting=career.get("screeningSetting") or "Good Fit and above",
            employment_type=career.get("employmentType") or "",
            work_setup=career.get("workSetup") or "",
            work_setup_remarks=career.get("workSetupRemarks") or "",
            cv_secret_prompt=career.get("cvSecretPrompt") or "",
            ai_interview_secret_prompt=career.get("aiInterviewSecretPrompt") or "",
            require_video=(
                career["requireVideo"] if isinstance(career.get("requireVideo"), bool) else True
            ),
            salary=Salary(
                is_negotiable=(
                    career["salaryNegotiable"]
                    if isinstance(career.get("salaryNegotiable"), bool)
                    else True
                ),
                minimum=_number_to_text(career.get("minimumSalary")),
                maximum=_number_to_text(career.get("maximumSalary")),
                currency=_currency_code(career),
            ),
            location=Location(
                country=career.get("country") or "Philippines",
                province=career.get("province") or "",
                city=career.get("location") or "",
            ),
            question_groups=question_groups or career.get("questions") or default_question_groups(),
            team=Team(members=members or []),
            status=career.get("status") or "draft",
            context=DraftContext(
                org_id=career.get("orgID"),
                last_persisted_by=(
                    last_edited_by.get("email") if isinstance(last_edited_by, Mapping) else None
                ),
                last_persisted_at=_now_iso(),
            ),
        )
        self._commit(draft)
        self.set_active_step(DEFAULT_STEP)
        return draft
