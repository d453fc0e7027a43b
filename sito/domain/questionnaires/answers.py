"""
Questionnaire answers as a tagged union

Each field type accepts exactly one answer shape:

- text, email, textarea -> ``TextAnswer`` (a string)
- select, radio         -> ``ChoiceAnswer`` (one string from the field options)
- checkbox              -> ``MultiChoiceAnswer`` (zero or more strings from the options)

Raw answers arrive as JSON (``str`` or ``list[str]``) keyed by field id and are
parsed against the field definition before anything is persisted.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from ...shared.validators import validate_email

TEXT_TYPES = frozenset({"text", "email", "textarea"})
SINGLE_CHOICE_TYPES = frozenset({"select", "radio"})
MULTI_CHOICE_TYPES = frozenset({"checkbox"})
CHOICE_TYPES = SINGLE_CHOICE_TYPES | MULTI_CHOICE_TYPES


class TextAnswer(BaseModel):
    kind: Literal["text"] = "text"
    value: str = ""


class ChoiceAnswer(BaseModel):
    kind: Literal["choice"] = "choice"
    value: str = ""


class MultiChoiceAnswer(BaseModel):
    kind: Literal["multi_choice"] = "multi_choice"
    values: list[str] = []


Answer = Annotated[Union[TextAnswer, ChoiceAnswer, MultiChoiceAnswer], Field(discriminator="kind")]


class AnswerValidationError(ValueError):
    """An answer is missing or does not fit its field"""

    def __init__(self, message: str, label: Optional[str] = None):
        super().__init__(message)
        self.label = label


class MissingRequiredAnswer(AnswerValidationError):
    def __init__(self, label: str):
        super().__init__(f"Please fill in the required field: {label}", label=label)


def parse_answer(field, raw: Any) -> Answer:
    """Turn a raw JSON answer into the answer type of ``field``"""
    field_type = field.field_type
    options = field.options or []

    if field_type in TEXT_TYPES:
        if raw is None:
            return TextAnswer()
        if not isinstance(raw, str):
            raise AnswerValidationError(f"{field.label} expects a text answer", field.label)
        if field_type == "email" and raw.strip():
            try:
                raw = validate_email(raw)
            except ValueError as e:
                raise AnswerValidationError(f"{field.label}: {e}", field.label) from e
        return TextAnswer(value=raw)

    if field_type in SINGLE_CHOICE_TYPES:
        if raw is None or raw == "":
            return ChoiceAnswer()
        if not isinstance(raw, str):
            raise AnswerValidationError(f"{field.label} expects a single option", field.label)
        if raw not in options:
            raise AnswerValidationError(
                f"{field.label}: '{raw}' is not one of the allowed options", field.label
            )
        return ChoiceAnswer(value=raw)

    if field_type in MULTI_CHOICE_TYPES:
        if raw is None:
            return MultiChoiceAnswer()
        if not isinstance(raw, list) or not all(isinstance(v, str) for v in raw):
            raise AnswerValidationError(f"{field.label} expects a list of options", field.label)
        invalid = [v for v in raw if v not in options]
        if invalid:
            raise AnswerValidationError(
                f"{field.label}: {', '.join(invalid)} not among the allowed options", field.label
            )
        return MultiChoiceAnswer(values=list(dict.fromkeys(raw)))

    raise AnswerValidationError(f"Unsupported field type: {field_type}", field.label)


def is_empty(answer: Answer) -> bool:
    if isinstance(answer, MultiChoiceAnswer):
        return len(answer.values) == 0
    return not answer.value.strip()


def validate_answers(fields, raw_answers: dict) -> dict[str, Answer]:
    """
    Parse every answer against its field, in field order.

    Raises AnswerValidationError for unknown field ids or malformed answers and
    MissingRequiredAnswer for the first required field left empty.
    """
    known = {f.id for f in fields}
    unknown = [field_id for field_id in raw_answers if field_id not in known]
    if unknown:
        raise AnswerValidationError(f"Unknown questionnaire field: {unknown[0]}")

    parsed: dict[str, Answer] = {}
    for field in sorted(fields, key=lambda f: f.order_index):
        answer = parse_answer(field, raw_answers.get(field.id))
        if field.required and is_empty(answer):
            raise MissingRequiredAnswer(field.label)
        parsed[field.id] = answer
    return parsed


def serialize_answers(parsed: dict[str, Answer]) -> dict:
    """Storage shape: field id -> str (scalar types) or list[str] (checkbox)"""
    return {
        field_id: answer.values if isinstance(answer, MultiChoiceAnswer) else answer.value
        for field_id, answer in parsed.items()
    }
