"""Tests for question classification, normalization and the draft models."""

from __future__ import annotations

from career_draft.models.draft import (
    CareerDraft,
    QuestionGroup,
    TeamMember,
    default_question_groups,
    normalize_groups,
    team_warnings,
)
from career_draft.models.question import (
    InterviewQuestion,
    PreScreenQuestion,
    classify,
    is_interview,
    is_pre_screen,
    normalize,
)
from career_draft.models.taxonomy import INTERVIEW_CATEGORIES, find_suggested_question


class TestClassify:
    def test_explicit_origin_wins(self):
        assert classify({"origin": "interview", "answerType": "dropdown"}) == "interview"
        assert classify({"origin": "pre-screen"}) == "pre-screen"

    def test_answer_type_marks_pre_screen(self):
        assert classify({"question": "Notice?", "answerType": "dropdown"}) == "pre-screen"

    def test_options_list_marks_pre_screen(self):
        assert classify({"question": "Notice?", "options": []}) == "pre-screen"

    def test_range_string_marks_pre_screen(self):
        assert classify({"question": "Salary?", "rangeMin": ""}) == "pre-screen"

    def test_plain_record_is_interview(self):
        assert classify({"question": "Tell me about yourself"}) == "interview"

    def test_non_mapping_is_interview(self):
        assert classify("a bare string") == "interview"
        assert classify(None) == "interview"

    def test_non_string_answer_type_ignored(self):
        assert classify({"question": "x", "answerType": 3}) == "interview"

    def test_model_instances(self):
        assert classify(PreScreenQuestion(question="x")) == "pre-screen"
        assert classify(InterviewQuestion(question="x")) == "interview"


class TestNormalize:
    def test_assigns_id_and_tag(self):
        question = normalize({"question": "Why this role?"})
        assert isinstance(question, InterviewQuestion)
        assert question.id
        assert is_interview(question)

    def test_pre_screen_defaults(self):
        question = normalize({"question": "Notice?", "options": ["Now", {"label": "Later"}]})
        assert isinstance(question, PreScreenQuestion)
        assert question.answer_type == "short_text"
        assert [o.label for o in question.options] == ["Now", "Later"]
        assert all(o.id for o in question.options)
        assert question.range_min == ""
        assert question.range_max == ""

    def test_unknown_answer_type_falls_back(self):
        question = normalize({"question": "x", "answerType": "essay"})
        assert question.answer_type == "short_text"

    def test_interview_strips_pre_screen_fields(self):
        question = normalize({"origin": "interview", "question": "x", "options": ["a"]})
        assert isinstance(question, InterviewQuestion)
        assert "options" not in question.model_dump()

    def test_text_fallback_keys(self):
        assert normalize({"text": "From text"}).question == "From text"
        assert normalize({"question": " ", "prompt": "From prompt"}).question == "From prompt"

    def test_keeps_existing_id(self):
        assert normalize({"id": 7, "question": "x"}).id == "7"

    def test_idempotent(self):
        records = [
            {"question": "Notice?", "answerType": "dropdown", "options": [{"label": "Now"}]},
            {"question": "Tell me about yourself"},
            {"question": "Salary?", "answerType": "range", "rangeMin": "10", "rangeMax": "20"},
        ]
        for record in records:
            once = normalize(record)
            assert normalize(once) == once
            assert normalize(once.model_dump(by_alias=True)) == once

    def test_model_input_is_copied(self):
        original = PreScreenQuestion(question="x", answer_type="dropdown")
        copy = normalize(original)
        copy.question = "changed"
        assert original.question == "x"
        assert is_pre_screen(copy)


class TestQuestionGroup:
    def test_raw_questions_classified_on_load(self):
        group = QuestionGroup.model_validate(
            {
                "id": 1,
                "category": "CV Validation / Experience",
                "questionCountToAsk": 1,
                "questions": [
                    {"question": "Notice?", "answerType": "dropdown"},
                    {"question": "Walk me through your CV"},
                ],
            }
        )
        assert is_pre_screen(group.questions[0])
        assert is_interview(group.questions[1])
        assert group.interview_count == 1

    def test_clamp(self):
        group = QuestionGroup(id=2, category="Technical", question_count_to_ask=4)
        group.questions = [InterviewQuestion(question="a")]
        group.clamp_question_count()
        assert group.question_count_to_ask == 1

    def test_clamp_leaves_unset(self):
        group = QuestionGroup(id=2, category="Technical")
        group.clamp_question_count()
        assert group.question_count_to_ask is None

    def test_wire_round_trip_keeps_camel_case(self):
        group = QuestionGroup(id=1, category="Technical", question_count_to_ask=0)
        dumped = group.model_dump(by_alias=True)
        assert "questionCountToAsk" in dumped


class TestDefaults:
    def test_default_groups_follow_taxonomy(self):
        groups = default_question_groups()
        assert [g.id for g in groups] == [1, 2, 3, 4, 5]
        assert [g.category for g in groups] == list(INTERVIEW_CATEGORIES)
        assert all(g.questions == [] for g in groups)

    def test_normalize_groups_empty(self):
        assert [g.id for g in normalize_groups([])] == [1, 2, 3, 4, 5]
        assert [g.id for g in normalize_groups(None)] == [1, 2, 3, 4, 5]

    def test_normalize_groups_raw(self):
        groups = normalize_groups([{"id": 9, "category": "Custom", "questions": ["x"]}])
        assert groups[0].id == 9
        assert is_interview(groups[0].questions[0])

    def test_default_draft(self):
        draft = CareerDraft()
        assert draft.screening_setting == "Good Fit and above"
        assert draft.require_video is True
        assert draft.salary.is_negotiable is True
        assert draft.salary.currency == "PHP"
        assert draft.location.country == "Philippines"
        assert draft.status == "draft"
        assert len(draft.question_groups) == 5

    def test_empty_question_list_restores_defaults(self):
        draft = CareerDraft.model_validate({"questions": []})
        assert len(draft.question_groups) == 5

    def test_storage_shape(self):
        stored = CareerDraft(job_title="Dev").to_storage()
        assert stored["jobTitle"] == "Dev"
        assert stored["salary"]["isNegotiable"] is True
        assert stored["context"]["orgID"] is None
        assert stored["questions"][0]["questionCountToAsk"] is None
        assert CareerDraft.model_validate(stored) == CareerDraft(job_title="Dev")


class TestTeam:
    def test_from_directory_record(self):
        member = TeamMember.from_directory_record(
            {"_id": "abc", "name": "Ana", "email": "ana@example.com", "image": "a.png"},
            role="job_owner",
        )
        assert member.member_id == "abc"
        assert member.role == "job_owner"
        assert member.model_dump(by_alias=True)["memberId"] == "abc"

    def test_warnings(self):
        draft = CareerDraft()
        assert team_warnings(draft) == ["Add at least one team member"]

        draft = CareerDraft(team={"members": [{"memberId": "1", "role": "viewer"}]})
        assert team_warnings(draft) == ["At least one member should be a Job Owner"]

        draft = CareerDraft(team={"members": [{"memberId": "1", "role": "job_owner"}]})
        assert team_warnings(draft) == []


class TestSuggestedQuestions:
    def test_lookup_case_insensitive(self):
        suggestion = find_suggested_question("notice period")
        assert suggestion is not None
        assert suggestion.default_options == ("Immediately", "< 30 days", "> 30 days")

    def test_unknown(self):
        assert find_suggested_question("Favourite colour") is None
