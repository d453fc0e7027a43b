"""Questionnaire repository - Database operations for questionnaires"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Questionnaire, QuestionnaireField, QuestionnaireResponse


class QuestionnaireRepository:
    """Repository for questionnaire database operations"""

    @staticmethod
    def get_active_schema(db: Session, owner_id: str, workflow_type: str) -> Optional[Questionnaire]:
        """The owner's active questionnaire for a workflow, if any"""
        return (
            db.query(Questionnaire)
            .filter(
                Questionnaire.owner_id == owner_id,
                Questionnaire.workflow_type == workflow_type,
                Questionnaire.is_active.is_(True),
            )
            .first()
        )

    @staticmethod
    def get_schema(db: Session, questionnaire_id: str) -> Optional[Questionnaire]:
        return db.query(Questionnaire).filter(Questionnaire.id == questionnaire_id).first()

    @staticmethod
    def get_owned_schema(db: Session, questionnaire_id: str, owner_id: str) -> Optional[Questionnaire]:
        return (
            db.query(Questionnaire)
            .filter(Questionnaire.id == questionnaire_id, Questionnaire.owner_id == owner_id)
            .first()
        )

    @staticmethod
    def list_schemas(db: Session, owner_id: str) -> list[Questionnaire]:
        return (
            db.query(Questionnaire)
            .filter(Questionnaire.owner_id == owner_id)
            .order_by(Questionnaire.created_at.desc())
            .all()
        )

    @staticmethod
    def create_schema(db: Session, owner_id: str, workflow_type: str, title: Optional[str]) -> Questionnaire:
        """Insert a questionnaire. Raises IntegrityError for a second (owner, type)."""
        questionnaire = Questionnaire(
            owner_id=owner_id, workflow_type=workflow_type, title=title, is_active=True
        )
        db.add(questionnaire)
        db.commit()
        db.refresh(questionnaire)
        return questionnaire

    @staticmethod
    def get_fields(db: Session, questionnaire_id: str) -> list[QuestionnaireField]:
        return (
            db.query(QuestionnaireField)
            .filter(QuestionnaireField.questionnaire_id == questionnaire_id)
            .order_by(QuestionnaireField.order_index.asc())
            .all()
        )

    @staticmethod
    def get_field(db: Session, field_id: str, questionnaire_id: str) -> Optional[QuestionnaireField]:
        return (
            db.query(QuestionnaireField)
            .filter(
                QuestionnaireField.id == field_id,
                QuestionnaireField.questionnaire_id == questionnaire_id,
            )
            .first()
        )

    @staticmethod
    def get_response(db: Session, response_id: str) -> Optional[QuestionnaireResponse]:
        return db.query(QuestionnaireResponse).filter(QuestionnaireResponse.id == response_id).first()

    @staticmethod
    def create_response(
        db: Session, questionnaire_id: str, respondent_id: str, answers: dict
    ) -> QuestionnaireResponse:
        response = QuestionnaireResponse(
            questionnaire_id=questionnaire_id, respondent_id=respondent_id, answers=answers
        )
        db.add(response)
        db.commit()
        db.refresh(response)
        return response
