"""Pydantic models for the in-progress job posting."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from career_draft.models.question import Question, is_interview, normalize
from career_draft.models.taxonomy import INTERVIEW_CATEGORIES

CareerStep = Literal["career-details", "cv-screening", "ai-setup", "pipeline", "review"]
DEFAULT_STEP: CareerStep = "career-details"

MemberRole = Literal["job_owner", "collaborator", "viewer"]
CareerStatus = Literal["draft", "active", "inactive"]

SCREENING_SETTINGS: tuple[str, ...] = (
    "Good Fit and above",
    "Only Strong Fit",
    "No Automatic Promotion",
)
WORK_SETUP_OPTIONS: tuple[str, ...] = ("Fully Remote", "Onsite", "Hybrid")
EMPLOYMENT_TYPE_OPTIONS: tuple[str, ...] = ("Full-Time", "Part-Time", "Contract", "Internship")
CURRENCY_OPTIONS: tuple[str, ...] = ("PHP", "USD", "EUR", "GBP", "AUD", "SGD", "JPY")


class QuestionGroup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    category: str
    question_count_to_ask: int | None = Field(default=None, alias="questionCountToAsk")
    questions: list[Question] = Field(default_factory=list)

    @field_validator("questions", mode="before")
    @classmethod
    def _classify_questions(cls, value: Any) -> list:
        # Untagged records are classified here, once, on the way in.
        if not isinstance(value, list):
            return []
        return [normalize(item) for item in value]

    @property
    def interview_count(self) -> int:
        return sum(1 for q in self.questions if is_interview(q))

    def clamp_question_count(self) -> None:
        """Keep questionCountToAsk within the live interview question count."""
        if self.question_count_to_ask is None:
            return
        if self.question_count_to_ask > self.interview_count:
            self.question_count_to_ask = self.interview_count


def default_question_groups() -> list[QuestionGroup]:
    """One group per taxonomy category; the first also holds pre-screen questions."""
    return [
        QuestionGroup(id=index, category=category)
        for index, category in enumerate(INTERVIEW_CATEGORIES, start=1)
    ]


def normalize_groups(groups: Any) -> list[QuestionGroup]:
    """Validate a raw group list; an empty or missing list yields the defaults."""
    if not isinstance(groups, list) or not groups:
        return default_question_groups()
    return [
        group.model_copy(deep=True) if isinstance(group, QuestionGroup)
        else QuestionGroup.model_validate(group)
        for group in groups
    ]


class Salary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_negotiable: bool = Field(default=True, alias="isNegotiable")
    minimum: str = ""
    maximum: str = ""
    currency: str = "PHP"


class Location(BaseModel):
    country: str = "Philippines"
    province: str = ""
    city: str = ""


class TeamMember(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    member_id: str = Field(alias="memberId")
    name: str = ""
    email: str = ""
    image: str | None = None
    role: MemberRole = "collaborator"

    @classmethod
    def from_directory_record(
        cls, record: dict[str, Any], role: MemberRole = "collaborator"
    ) -> TeamMember:
        """Build a member entry from a member-directory record ({_id, name, ...})."""
        return cls(
            member_id=str(record.get("_id") or record.get("memberId") or ""),
            name=record.get("name") or "",
            email=record.get("email") or "",
            image=record.get("image"),
            role=role,
        )


class Team(BaseModel):
    members: list[TeamMember] = Field(default_factory=list)


class DraftContext(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    org_id: str | None = Field(default=None, alias="orgID")
    last_persisted_by: str | None = Field(default=None, alias="lastPersistedBy")
    last_persisted_at: str | None = Field(default=None, alias="lastPersistedAt")


class CareerDraft(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_title: str = Field(default="", alias="jobTitle")
    description: str = ""
    screening_setting: str = Field(default="Good Fit and above", alias="screeningSetting")
    employment_type: str = Field(default="", alias="employmentType")
    work_setup: str = Field(default="", alias="workSetup")
    work_setup_remarks: str = Field(default="", alias="workSetupRemarks")
    cv_secret_prompt: str = Field(default="", alias="cvSecretPrompt")
    ai_interview_secret_prompt: str = Field(default="", alias="aiInterviewSecretPrompt")
    require_video: bool = Field(default=True, alias="requireVideo")
    salary: Salary = Field(default_factory=Salary)
    location: Location = Field(default_factory=Location)
    question_groups: list[QuestionGroup] = Field(
        default_factory=default_question_groups, alias="questions"
    )
    team: Team = Field(default_factory=Team)
    status: CareerStatus = "draft"
    context: DraftContext = Field(default_factory=DraftContext)

    @field_validator("question_groups", mode="before")
    @classmethod
    def _default_groups(cls, value: Any) -> Any:
        if not value:
            return default_question_groups()
        return value

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def team_warnings(draft: CareerDraft) -> list[str]:
    """Soft checks on the team; never blocks saving."""
    warnings = []
    members = draft.team.members
    if not members:
        warnings.append("Add at least one team member")
    elif not any(member.role == "job_owner" for member in members):
        warnings.append("At least one member should be a Job Owner")
    return warnings
