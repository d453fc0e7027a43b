from types import SimpleNamespace

import pytest

from sito.domain.questionnaires.answers import (
    AnswerValidationError,
    ChoiceAnswer,
    MissingRequiredAnswer,
    MultiChoiceAnswer,
    TextAnswer,
    parse_answer,
    serialize_answers,
    validate_answers,
)


def make_field(field_id, field_type, label=None, required=False, options=None, order_index=0):
    return SimpleNamespace(
        id=field_id,
        field_type=field_type,
        label=label or field_id.title(),
        required=required,
        options=options,
        order_index=order_index,
    )


class TestParseAnswer:
    def test_text_types_become_text_answers(self):
        for field_type in ("text", "textarea", "email"):
            answer = parse_answer(make_field("f", field_type), "hello@example.com")
            assert isinstance(answer, TextAnswer)

    def test_email_is_checked_and_lowercased(self):
        answer = parse_answer(make_field("mail", "email"), "Sam@Example.COM")
        assert answer.value == "sam@example.com"

        with pytest.raises(AnswerValidationError):
            parse_answer(make_field("mail", "email"), "not-an-email")

    def test_select_accepts_only_listed_options(self):
        field = make_field("level", "select", options=["Beginner", "Advanced"])
        assert parse_answer(field, "Advanced") == ChoiceAnswer(value="Advanced")

        with pytest.raises(AnswerValidationError):
            parse_answer(field, "Expert")

    def test_scalar_field_rejects_a_list(self):
        with pytest.raises(AnswerValidationError):
            parse_answer(make_field("level", "radio", options=["A", "B"]), ["A"])

    def test_checkbox_needs_a_list_of_options(self):
        field = make_field("days", "checkbox", options=["Mon", "Tue", "Wed"])
        answer = parse_answer(field, ["Tue", "Mon", "Tue"])
        assert answer == MultiChoiceAnswer(values=["Tue", "Mon"])

        with pytest.raises(AnswerValidationError):
            parse_answer(field, "Mon")
        with pytest.raises(AnswerValidationError):
            parse_answer(field, ["Sun"])


class TestValidateAnswers:
    def test_required_select_without_answer_is_named(self):
        fields = [
            make_field("goal", "text", label="Your goal", order_index=0),
            make_field(
                "level", "select", label="Level", required=True, options=["A", "B"], order_index=1
            ),
        ]
        with pytest.raises(MissingRequiredAnswer) as exc:
            validate_answers(fields, {"goal": "Learn glazing"})

        assert str(exc.value) == "Please fill in the required field: Level"
        assert exc.value.label == "Level"

    def test_first_missing_field_by_order_is_reported(self):
        fields = [
            make_field("late", "text", label="Later", required=True, order_index=5),
            make_field("early", "text", label="Earlier", required=True, order_index=1),
        ]
        with pytest.raises(MissingRequiredAnswer) as exc:
            validate_answers(fields, {})
        assert exc.value.label == "Earlier"

    def test_whitespace_does_not_satisfy_a_required_field(self):
        fields = [make_field("name", "text", required=True)]
        with pytest.raises(MissingRequiredAnswer):
            validate_answers(fields, {"name": "   "})

    def test_empty_checkbox_does_not_satisfy_a_required_field(self):
        fields = [make_field("days", "checkbox", required=True, options=["Mon"])]
        with pytest.raises(MissingRequiredAnswer):
            validate_answers(fields, {"days": []})

    def test_unknown_field_ids_are_rejected(self):
        with pytest.raises(AnswerValidationError, match="Unknown questionnaire field"):
            validate_answers([make_field("name", "text")], {"other": "x"})

    def test_serialized_answers_keep_their_shape(self):
        fields = [
            make_field("name", "text", order_index=0),
            make_field("days", "checkbox", options=["Mon", "Tue"], order_index=1),
        ]
        parsed = validate_answers(fields, {"name": "Sam", "days": ["Tue"]})
        assert serialize_answers(parsed) == {"name": "Sam", "days": ["Tue"]}
