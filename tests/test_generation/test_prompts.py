"""Tests for generation prompt assembly."""

from __future__ import annotations

from career_draft.generation.prompts import build_all_categories_prompt, build_category_prompt
from career_draft.models.taxonomy import INTERVIEW_CATEGORIES


class TestAllCategoriesPrompt:
    def test_lists_every_category_with_counts(self):
        prompt = build_all_categories_prompt(
            "Data Analyst", "Own our dashboards.", INTERVIEW_CATEGORIES, 5, []
        )
        assert prompt.startswith("Generate 25 interview questions for the following Job opening:")
        for name, description in INTERVIEW_CATEGORIES.items():
            assert f"Category:\n{name}\nCategory Description:\n{description}" in prompt
            assert f"5 questions for {name}" in prompt
        assert "already covered" not in prompt
        assert prompt.rstrip().endswith(
            "Do not include any explanations, markdown fences, or surrounding text."
        )

    def test_existing_questions_listed_once(self):
        prompt = build_all_categories_prompt(
            "Data Analyst",
            "Own our dashboards.",
            {"Technical": "Hard skills."},
            2,
            ["What is SQL?", "Explain a join."],
        )
        assert (
            "Do not generate questions that are already covered in this list:\n"
            "  1. What is SQL?\n  2. Explain a join."
        ) in prompt
        assert '"questions":["Question 1","Question 2"]' in prompt
        assert "Each questions array must contain exactly 2 items." in prompt

    def test_extra_instruction_before_schema(self):
        prompt = build_all_categories_prompt(
            "Dev", "Code.", {"Others": "Misc."}, 1, [], extra_instruction="Use British English."
        )
        assert prompt.index("Use British English.") < prompt.index("Respond ONLY with valid JSON.")


class TestCategoryPrompt:
    def test_single_category_structure(self):
        prompt = build_category_prompt(
            "Dev", "Code.", "Analytical", "Reasoning.", 5, ["Existing?"]
        )
        segments = prompt.split("\n\n")
        assert segments[0] == "Generate 5 interview questions for the following Job opening:"
        assert segments[1:5] == ["Job Title:", "Dev", "Job Description:", "Code."]
        assert segments[5:9] == [
            "Interview Category:",
            "Analytical",
            "Interview Category Description:",
            "Reasoning.",
        ]
        assert "  1. Existing?" in prompt
        assert "Use the category value provided above verbatim." in segments
        assert "Provide exactly 5 questions in the questions array." in segments
