"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from career_draft.clients.career_api import CareerApiClient
from career_draft.clients.llm_client import LLMClient, LLMResponse
from career_draft.engine.manager import QuestionManager
from career_draft.engine.notify import RecordingNotifier
from career_draft.models.draft import CareerDraft, QuestionGroup, TeamMember, default_question_groups
from career_draft.models.question import InterviewQuestion, PreScreenQuestion, QuestionOption
from career_draft.store.draft_store import DraftStore
from career_draft.store.storage import MemoryStorage


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> DraftStore:
    return DraftStore(storage)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def manager(store: DraftStore, notifier: RecordingNotifier) -> QuestionManager:
    return QuestionManager(store, notifier)


@pytest.fixture
def groups() -> list[QuestionGroup]:
    return default_question_groups()


@pytest.fixture
def populated_groups() -> list[QuestionGroup]:
    """Default groups with two pre-screen and four technical questions."""
    groups = default_question_groups()
    groups[0].questions = [
        PreScreenQuestion(
            id="ps-1",
            question="How long is your notice period?",
            answer_type="dropdown",
            options=[
                QuestionOption(id="opt-1", label="Immediately"),
                QuestionOption(id="opt-2", label="< 30 days"),
            ],
        ),
        PreScreenQuestion(id="ps-2", question="Expected salary?", answer_type="range"),
    ]
    groups[1].questions = [
        InterviewQuestion(id=f"t{i}", question=f"Technical question {i}") for i in range(4)
    ]
    groups[1].question_count_to_ask = 3
    return groups


@pytest.fixture
def complete_draft() -> CareerDraft:
    """A draft that passes every step up to review."""
    groups = default_question_groups()
    groups[1].questions = [
        InterviewQuestion(question=f"Describe your experience with tool {i}") for i in range(5)
    ]
    return CareerDraft(
        job_title="Backend Engineer",
        description="<p>Build and run our APIs.</p>",
        employment_type="Full-Time",
        work_setup="Hybrid",
        salary={"minimum": "50000", "maximum": "80000"},
        location={"province": "Metro Manila", "city": "Makati"},
        question_groups=groups,
        team={"members": [TeamMember(member_id="m1", name="Ana", email="ana@example.com", role="job_owner")]},
    )


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="[]", input_tokens=100, output_tokens=50)
    )
    return client


@pytest.fixture
def mock_career_api() -> CareerApiClient:
    client = AsyncMock(spec=CareerApiClient)
    client.create_career = AsyncMock(return_value={"message": "Career added"})
    client.update_career = AsyncMock(return_value={"message": "Career updated"})
    return client
