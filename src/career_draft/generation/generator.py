"""Async interview question generation against the LLM client."""

from __future__ import annotations

import logging
import time

import anthropic

from career_draft.clients.llm_client import LLMClient
from career_draft.config import AppConfig, load_config
from career_draft.engine.collection import interview_questions
from career_draft.engine.manager import QuestionManager
from career_draft.engine.notify import Notifier
from career_draft.errors import GenerationError, PayloadParseError
from career_draft.generation.integrator import ALL_CATEGORIES, parse_payload
from career_draft.generation.prompts import (
    SYSTEM_PROMPT,
    build_all_categories_prompt,
    build_category_prompt,
)
from career_draft.logging.cost_calculator import calculate_cost
from career_draft.logging.generation_store import GenerationLogStore
from career_draft.logging.models import GenerationLog
from career_draft.models.taxonomy import INTERVIEW_CATEGORIES
from career_draft.utils.text import normalize_category_name, strip_tags

logger = logging.getLogger(__name__)

MISSING_JOB_DETAILS = "Please complete the job title and description first"
UNKNOWN_CATEGORY = "Unknown interview category"
NOTHING_GENERATED = "No new questions generated"
GENERATION_FAILED = "Error generating questions, please try again"


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


class QuestionGenerator:
    """Requests interview questions and merges them into the draft.

    At most one request per scope is in flight: a second call for a scope that
    is still pending returns 0 without doing anything. Requests for different
    scopes (all categories, or one category) may overlap.
    """

    def __init__(
        self,
        llm: LLMClient,
        manager: QuestionManager,
        notifier: Notifier | None = None,
        config: AppConfig | None = None,
        log_store: GenerationLogStore | None = None,
    ):
        self.llm = llm
        self.manager = manager
        self.notifier = notifier or manager.notifier
        self.config = config or load_config()
        self.log_store = log_store
        self._pending: set[str] = set()

    @property
    def pending(self) -> frozenset[str]:
        return frozenset(self._pending)

    def is_pending(self, scope: str) -> bool:
        return self._scope_key(scope) in self._pending

    @staticmethod
    def _scope_key(scope: str) -> str:
        return scope if scope == ALL_CATEGORIES else normalize_category_name(scope)

    def _job_details(self) -> tuple[str, str]:
        draft = self.manager.store.draft
        title = draft.job_title.strip()
        description = strip_tags(draft.description).strip()
        if not title or not description:
            raise GenerationError(MISSING_JOB_DETAILS)
        return title, description

    def _existing_questions(self) -> list[str]:
        return [
            q.question
            for group in self.manager.groups
            for q in interview_questions(group)
            if q.question.strip()
        ]

    @staticmethod
    def _resolve_category(name: str) -> tuple[str, str]:
        key = normalize_category_name(name)
        for category, description in INTERVIEW_CATEGORIES.items():
            if normalize_category_name(category) == key:
                return category, description
        raise GenerationError(UNKNOWN_CATEGORY)

    async def generate_all(self) -> int:
        """Generate a batch for every interview category. Returns the added count."""
        if self.is_pending(ALL_CATEGORIES):
            return 0
        try:
            title, description = self._job_details()
        except GenerationError as exc:
            self.notifier.error(str(exc))
            return 0

        per_category = self.config.generation.questions_per_category
        prompt = build_all_categories_prompt(
            title,
            description,
            INTERVIEW_CATEGORIES,
            per_category,
            self._existing_questions(),
            self.config.generation.extra_instruction,
        )
        added = await self._run(ALL_CATEGORIES, prompt, list(INTERVIEW_CATEGORIES))
        if added:
            self.notifier.success(f"Generated {added} new question{_plural(added)}")
        return added

    async def generate_for_category(self, category: str) -> int:
        """Generate a batch for one interview category. Returns the added count."""
        if self.is_pending(category):
            return 0
        try:
            title, description = self._job_details()
            name, category_description = self._resolve_category(category)
        except GenerationError as exc:
            self.notifier.error(str(exc))
            return 0

        per_category = self.config.generation.questions_per_category
        prompt = build_category_prompt(
            title,
            description,
            name,
            category_description,
            per_category,
            self._existing_questions(),
            self.config.generation.extra_instruction,
        )
        added = await self._run(name, prompt, name)
        if added:
            self.notifier.success(f"Generated {added} {name} question{_plural(added)}")
        return added

    async def _run(self, scope: str, prompt: str, category_context: str | list[str]) -> int:
        key = self._scope_key(scope)
        self._pending.add(key)
        model = self.config.llm.model
        log = GenerationLog(
            scope=scope,
            job_title=self.manager.store.draft.job_title,
            org_id=self.manager.store.draft.context.org_id,
            model=model,
        )
        start = time.monotonic()
        try:
            response = await self.llm.generate(
                prompt,
                system=SYSTEM_PROMPT,
                model=model,
                max_tokens=self.config.llm.max_tokens,
            )
            log.total_input_tokens = response.input_tokens
            log.total_output_tokens = response.output_tokens
            payload = parse_payload(response.text, category_context)
            added = self.manager.integrate_generated(payload)
            log.added_count = added
        except (PayloadParseError, anthropic.APIError) as exc:
            logger.error("Question generation failed for %s", scope, exc_info=True)
            log.success = False
            log.error_message = str(exc)
            self.notifier.error(GENERATION_FAILED)
            return 0
        finally:
            self._pending.discard(key)
            log.elapsed_seconds = round(time.monotonic() - start, 2)
            log.estimated_cost_usd = calculate_cost(
                [(model, log.total_input_tokens, log.total_output_tokens)]
            )
            self._record(log)

        if not added:
            self.notifier.error(NOTHING_GENERATED)
        return added

    def _record(self, log: GenerationLog) -> None:
        if self.log_store is None:
            return
        try:
            self.log_store.save_log(log)
        except Exception:
            logger.warning("Failed to record generation log", exc_info=True)
