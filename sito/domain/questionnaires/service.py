"""Questionnaire service - schema editing, rendering, validation and submission"""

import logging
from typing import Optional

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Profile, Questionnaire, QuestionnaireField, QuestionnaireResponse
from .answers import AnswerValidationError, serialize_answers, validate_answers
from .repository import QuestionnaireRepository
from .schemas import FieldCreate, FieldUpdate, QuestionnaireCreate, RenderedField

logger = logging.getLogger(__name__)


class QuestionnaireService:
    """Service layer for dynamic intake questionnaires"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = QuestionnaireRepository()

    # ------------------------------------------------------------------
    # Schema lookup and editing (owner only)
    # ------------------------------------------------------------------

    def get_schema(self, owner_id: str, workflow_type: str) -> Optional[Questionnaire]:
        """Active questionnaire for (owner, workflow). None when absent or inactive."""
        return self.repo.get_active_schema(self.db, owner_id, workflow_type)

    def list_schemas(self, owner: Profile) -> list[Questionnaire]:
        return self.repo.list_schemas(self.db, owner.id)

    def get_owned_schema(self, questionnaire_id: str, owner: Profile) -> Questionnaire:
        questionnaire = self.repo.get_owned_schema(self.db, questionnaire_id, owner.id)
        if not questionnaire:
            raise HTTPException(status_code=404, detail="Questionnaire not found")
        return questionnaire

    def create_schema(self, data: QuestionnaireCreate, owner: Profile) -> Questionnaire:
        try:
            questionnaire = self.repo.create_schema(self.db, owner.id, data.workflow_type, data.title)
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Owner {owner.id} already has a {data.workflow_type} questionnaire")
            raise HTTPException(
                status_code=409,
                detail="You already have a questionnaire for this type. Please edit the existing one.",
            ) from e

        logger.info(f"✅ Created {data.workflow_type} questionnaire {questionnaire.id} for {owner.id}")
        return questionnaire

    def set_active(self, questionnaire_id: str, is_active: bool, owner: Profile) -> Questionnaire:
        questionnaire = self.get_owned_schema(questionnaire_id, owner)
        questionnaire.is_active = is_active
        self.db.commit()
        self.db.refresh(questionnaire)
        return questionnaire

    def add_field(self, questionnaire_id: str, data: FieldCreate, owner: Profile) -> QuestionnaireField:
        """Append a field after the current last one"""
        questionnaire = self.get_owned_schema(questionnaire_id, owner)
        fields = self.repo.get_fields(self.db, questionnaire.id)
        next_index = fields[-1].order_index + 1 if fields else 0

        field = QuestionnaireField(
            questionnaire_id=questionnaire.id,
            field_type=data.field_type,
            label=data.label,
            placeholder=data.placeholder,
            required=data.required,
            options=data.options,
            order_index=next_index,
        )
        self.db.add(field)
        self.db.commit()
        self.db.refresh(field)
        return field

    def update_field(
        self, questionnaire_id: str, field_id: str, data: FieldUpdate, owner: Profile
    ) -> QuestionnaireField:
        questionnaire = self.get_owned_schema(questionnaire_id, owner)
        field = self._get_field(field_id, questionnaire.id)

        merged = {
            "field_type": data.field_type or field.field_type,
            "label": data.label if data.label is not None else field.label,
            "placeholder": data.placeholder if data.placeholder is not None else field.placeholder,
            "required": data.required if data.required is not None else field.required,
            "options": data.options if data.options is not None else field.options,
        }
        try:
            checked = FieldCreate(**merged)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=e.errors()[0]["msg"]) from e

        field.field_type = checked.field_type
        field.label = checked.label
        field.placeholder = checked.placeholder
        field.required = checked.required
        field.options = checked.options
        self.db.commit()
        self.db.refresh(field)
        return field

    def delete_field(self, questionnaire_id: str, field_id: str, owner: Profile) -> dict:
        questionnaire = self.get_owned_schema(questionnaire_id, owner)
        field = self._get_field(field_id, questionnaire.id)
        self.db.delete(field)
        self.db.commit()
        return {"message": "Field deleted"}

    def move_field(
        self, questionnaire_id: str, field_id: str, direction: str, owner: Profile
    ) -> list[RenderedField]:
        """
        Move a field one position up or down by swapping order_index with its
        neighbour. Both rows are written in one transaction; no other field changes.
        """
        questionnaire = self.get_owned_schema(questionnaire_id, owner)
        fields = self.repo.get_fields(self.db, questionnaire.id)

        position = next((i for i, f in enumerate(fields) if f.id == field_id), None)
        if position is None:
            raise HTTPException(status_code=404, detail="Field not found")

        neighbour_position = position - 1 if direction == "up" else position + 1
        if neighbour_position < 0 or neighbour_position >= len(fields):
            raise HTTPException(
                status_code=400,
                detail=f"Field is already {'first' if direction == 'up' else 'last'}",
            )

        field, neighbour = fields[position], fields[neighbour_position]
        field.order_index, neighbour.order_index = neighbour.order_index, field.order_index
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Failed to reorder fields of questionnaire {questionnaire.id}")
            raise

        return self.render(questionnaire)

    def _get_field(self, field_id: str, questionnaire_id: str) -> QuestionnaireField:
        field = self.repo.get_field(self.db, field_id, questionnaire_id)
        if not field:
            raise HTTPException(status_code=404, detail="Field not found")
        return field

    # ------------------------------------------------------------------
    # Respondent side
    # ------------------------------------------------------------------

    def render(self, questionnaire: Questionnaire) -> list[RenderedField]:
        """Ordered fields for presentation. No side effects."""
        fields = self.repo.get_fields(self.db, questionnaire.id)
        return [RenderedField.model_validate(f) for f in fields]

    def validate(self, fields, answers: dict) -> dict:
        """Parse answers against the fields; 400 names the first problem"""
        try:
            return validate_answers(fields, answers)
        except AnswerValidationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

    def submit(self, questionnaire_id: str, respondent: Profile, answers: dict) -> QuestionnaireResponse:
        """Validate and store an immutable response; its id gates the follow-up action"""
        questionnaire = self.repo.get_schema(self.db, questionnaire_id)
        if not questionnaire:
            raise HTTPException(status_code=404, detail="Questionnaire not found")
        if not questionnaire.is_active:
            raise HTTPException(status_code=400, detail="This questionnaire is not accepting responses")

        fields = self.repo.get_fields(self.db, questionnaire.id)
        parsed = self.validate(fields, answers)

        response = self.repo.create_response(
            self.db, questionnaire.id, respondent.id, serialize_answers(parsed)
        )
        logger.info(
            f"📝 Stored questionnaire response {response.id} from {respondent.id} for {questionnaire.id}"
        )
        return response

    def verify_response(
        self,
        response_id: str,
        respondent_id: str,
        owner_id: str,
        questionnaire_id: Optional[str] = None,
        workflow_type: Optional[str] = None,
    ) -> QuestionnaireResponse:
        """Check a response may be attached as provenance to the respondent's action"""
        response = self.repo.get_response(self.db, response_id)
        if not response or response.respondent_id != respondent_id:
            raise HTTPException(status_code=400, detail="Questionnaire response not found")

        if questionnaire_id and response.questionnaire_id != questionnaire_id:
            raise HTTPException(
                status_code=400,
                detail="Questionnaire response does not match the current questionnaire",
            )

        questionnaire = self.repo.get_schema(self.db, response.questionnaire_id)
        if not questionnaire or questionnaire.owner_id != owner_id:
            raise HTTPException(
                status_code=400, detail="Questionnaire response belongs to another owner"
            )

        if workflow_type and questionnaire.workflow_type != workflow_type:
            raise HTTPException(
                status_code=400, detail="Questionnaire response is for a different workflow"
            )
        return response
