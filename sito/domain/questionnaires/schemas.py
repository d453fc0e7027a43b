"""Questionnaire domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, field_validator, model_validator

from ...shared.validators import normalize_options
from .answers import CHOICE_TYPES

WorkflowType = Literal["appointment", "course_interest"]
FieldType = Literal["text", "email", "textarea", "select", "radio", "checkbox"]


class QuestionnaireCreate(BaseModel):
    workflow_type: WorkflowType
    title: Optional[str] = None


class QuestionnaireActiveUpdate(BaseModel):
    is_active: bool


class FieldCreate(BaseModel):
    """Schema for adding a field to a questionnaire"""

    field_type: FieldType
    label: str
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[list[str]] = None

    @field_validator("label")
    @classmethod
    def validate_label(cls, v):
        if not v or not v.strip():
            raise ValueError("Field label is required")
        return v.strip()

    @model_validator(mode="after")
    def validate_options(self):
        if self.field_type in CHOICE_TYPES:
            self.options = normalize_options(self.options)
            if not self.options:
                raise ValueError("Choice fields need at least one option")
        else:
            self.options = None
        return self


class FieldUpdate(BaseModel):
    """Partial field update. Type changes are re-validated against options."""

    field_type: Optional[FieldType] = None
    label: Optional[str] = None
    placeholder: Optional[str] = None
    required: Optional[bool] = None
    options: Optional[list[str]] = None


class FieldMove(BaseModel):
    direction: Literal["up", "down"]


class RenderedField(BaseModel):
    """Presentation projection of a questionnaire field"""

    id: str
    field_type: FieldType
    label: str
    placeholder: Optional[str] = None
    required: bool
    options: Optional[list[str]] = None
    order_index: int

    class Config:
        from_attributes = True


class QuestionnaireResponseSchema(BaseModel):
    id: str
    owner_id: str
    workflow_type: WorkflowType
    title: Optional[str] = None
    is_active: bool
    fields: list[RenderedField] = []

    class Config:
        from_attributes = True


class SubmissionCreate(BaseModel):
    answers: dict[str, Union[str, list[str], None]]


class SubmissionResponse(BaseModel):
    id: str
    questionnaire_id: str
    respondent_id: str
    answers: dict
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
