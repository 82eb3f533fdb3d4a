"""Tests for parsing and merging generated interview questions."""

from __future__ import annotations

import pytest

from career_draft.engine.collection import interview_questions
from career_draft.errors import PayloadParseError
from career_draft.generation.integrator import integrate, parse_payload
from career_draft.models.question import is_interview


class TestParsePayload:
    def test_structured_input_passes_through(self):
        payload = [{"category": "Technical", "questions": ["Q1"]}]
        assert parse_payload(payload) is payload

    def test_fenced_json(self):
        raw = '```json\n[{"category":"Behavioral","questions":["Q1","Q2"]}]\n```'
        assert parse_payload(raw) == [{"category": "Behavioral", "questions": ["Q1", "Q2"]}]

    def test_json_with_surrounding_text(self):
        raw = 'Sure! Here they are: [{"category":"Others","questions":["Why us?"]}] Good luck.'
        assert parse_payload(raw) == [{"category": "Others", "questions": ["Why us?"]}]

    def test_plain_text_with_single_category(self):
        raw = "1. What is a closure?\n2. Explain the GIL.\n"
        assert parse_payload(raw, "Technical") == [
            {"category": "Technical", "questions": ["What is a closure?", "Explain the GIL."]}
        ]

    def test_plain_text_without_category_fails(self):
        with pytest.raises(PayloadParseError):
            parse_payload("1. What is a closure?")

    def test_plain_text_with_category_list_fails(self):
        with pytest.raises(PayloadParseError, match="category context"):
            parse_payload("- What is a closure?", ["Technical", "Behavioral"])

    def test_plain_text_with_one_item_category_list(self):
        assert parse_payload("- What is a closure?", ["Technical"]) == [
            {"category": "Technical", "questions": ["What is a closure?"]}
        ]

    @pytest.mark.parametrize("context", ["Technical", ["Technical"], None])
    def test_truncated_json_is_rejected(self, context):
        raw = '[{"category":"Technical","questions":["Q1","Q2","Q3 is abo'
        with pytest.raises(PayloadParseError, match="not valid JSON"):
            parse_payload(raw, context)

    def test_truncated_fenced_json_is_rejected(self):
        raw = '```json\n{"category":"Technical","questions":["Q1",'
        with pytest.raises(PayloadParseError, match="not valid JSON"):
            parse_payload(raw, "Technical")

    @pytest.mark.parametrize("raw", [None, "", "   \n"])
    def test_empty_input(self, raw):
        with pytest.raises(PayloadParseError, match="Empty response"):
            parse_payload(raw)

    def test_only_fences(self):
        with pytest.raises(PayloadParseError):
            parse_payload("```json\n```")

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_payload(None)


class TestIntegrate:
    def test_mismatched_case_category_matches(self, populated_groups):
        result = integrate(populated_groups, [{"category": "technical", "questions": ["New Q"]}])
        assert result.added_count == 1
        assert result.groups[1].interview_count == 5

    def test_slash_spacing_category_matches(self, groups):
        result = integrate(groups, [{"category": "cv validation/experience", "questions": ["Q"]}])
        assert result.groups[0].interview_count == 1

    def test_same_payload_twice_adds_once(self, groups):
        payload = [{"category": "Behavioral", "questions": ["Q1", "Q2"]}]
        first = integrate(groups, payload)
        second = integrate(first.groups, payload)
        assert first.added_count == 2
        assert second.added_count == 0
        assert second.groups is first.groups

    def test_dedupes_within_batch(self, groups):
        result = integrate(groups, [{"category": "Analytical", "questions": ["Q1", " q1 ", "Q2"]}])
        assert [q.question for q in interview_questions(result.groups[3])] == ["Q1", "Q2"]

    def test_dedupes_against_existing(self, populated_groups):
        result = integrate(
            populated_groups, [{"category": "Technical", "questions": ["technical question 0"]}]
        )
        assert result.added_count == 0
        assert result.groups is populated_groups

    def test_unknown_category_dropped(self, groups, caplog):
        result = integrate(groups, [{"category": "Astrology", "questions": ["Q"]}])
        assert result.added_count == 0
        assert "Astrology" in caplog.text

    def test_single_entry_and_dict_questions(self, groups):
        result = integrate(groups, {"category": "Others", "questions": {"a": "Q1", "b": "Q2"}})
        assert result.added_count == 2

    def test_object_question_entries(self, groups):
        payload = [{"category": "Technical", "questions": [{"question": "Q1"}, {"text": "Q2"}, 5]}]
        result = integrate(groups, payload)
        assert [q.question for q in result.groups[1].questions] == ["Q1", "Q2"]

    def test_appended_as_tagged_interview_with_fresh_ids(self, groups):
        result = integrate(groups, [{"category": "Technical", "questions": ["Q1", "Q2"]}])
        questions = result.groups[1].questions
        assert all(is_interview(q) for q in questions)
        assert questions[0].id != questions[1].id

    def test_reclamps_count(self, populated_groups):
        populated_groups[1].question_count_to_ask = 10
        result = integrate(populated_groups, [{"category": "Technical", "questions": ["Q"]}])
        assert result.groups[1].question_count_to_ask == 5

    def test_input_not_mutated(self, groups):
        integrate(groups, [{"category": "Technical", "questions": ["Q"]}])
        assert groups[1].questions == []

    def test_empty_groups_get_defaults(self):
        result = integrate([], [{"category": "Technical", "questions": ["Q"]}])
        assert len(result.groups) == 5
        assert result.added_count == 1

    def test_invalid_entries_ignored(self, groups):
        result = integrate(groups, ["nonsense", {"questions": ["Q"]}, {"category": "Technical"}])
        assert result.added_count == 0
