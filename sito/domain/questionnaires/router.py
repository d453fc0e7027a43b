"""Questionnaire router - FastAPI endpoints for questionnaires"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from .schemas import (
    FieldCreate,
    FieldMove,
    FieldUpdate,
    QuestionnaireActiveUpdate,
    QuestionnaireCreate,
    QuestionnaireResponseSchema,
    RenderedField,
    SubmissionCreate,
    SubmissionResponse,
    WorkflowType,
)
from .service import QuestionnaireService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/questionnaires", tags=["Questionnaires"])


def get_questionnaire_service(db: Session = Depends(get_db)) -> QuestionnaireService:
    """Dependency injection for QuestionnaireService"""
    return QuestionnaireService(db)


# ============================================================================
# OWNER: SCHEMA MANAGEMENT
# ============================================================================


@router.get("", response_model=list[QuestionnaireResponseSchema])
async def list_questionnaires(
    current_user: Profile = Depends(get_current_user),
    service: QuestionnaireService = Depends(get_questionnaire_service),
):
    """All questionnaires of the current owner with their fields"""
    return service.list_schemas(current_user)


@router.post("", response_model=QuestionnaireResponseSchema, status_code=201)
async def create_questionnaire(
    data: QuestionnaireCreate,
    current_user: Profile = Depends(get_current_user),
    service: QuestionnaireService = Depends(get_questionnaire_service),
):
    return service.create_schema(data, current_user)


@router.patch("/{questionnaire_id}/active", response_model=QuestionnaireResponseSchema)
async def set_questionnaire_active(
    questionnaire_id: str,
    data: QuestionnaireActiveUpdate,
    current_user: Profile = Depends(get_current_user),
    service: QuestionnaireService = Depends(get_questionnaire_service),
):
    return service.set_active(questionnaire_id, data.is_active, current_user)


@router.post("/{questionnaire_id}/fields", response_model=RenderedField, status_code=201)
async def add_field(
    questionnaire_id: str,
    data: FieldCreate,
    current_user: Profile = Depends(get_current_user),
    service: QuestionnaireService = Depends(get_questionnaire_service),
):
    return service.add_field(questionnaire_id, data, current_user)


@router.patch("/{questionnaire_id}/fields/{field_id}", response_model=RenderedField)
async def update_field(
    questionnaire_id: str,
    field_id: str,
    data: FieldUpdate,
    current_user: Profile = Depends(get_current_user),
    service: QuestionnaireService = Depends(get_questionnaire_service),
):
    return service.update_field(questionnaire_id, field_id, data, current_user)


@router.delete("/{questionnaire_id}/fields/{field_id}")
async def delete_field(
    questionnaire_id: str,
    field_id: str,
    current_user: Profile = Depends(get_current_user),
    service: QuestionnaireService = Depends(get_questionnaire_service),
):
    return service.delete_field(questionnaire_id, field_id, current_user)


@router.post("/{questionnaire_id}/fields/{field_id}/move", response_model=list[RenderedField])
async def move_field(
    questionnaire_id: str,
    field_id: str,
    data: FieldMove,
    current_user: Profile = Depends(get_current_user),
    service: QuestionnaireService = Depends(get_questionnaire_service),
):
    """Swap a field with its neighbour above or below"""
    return service.move_field(questionnaire_id, field_id, data.direction, current_user)


# ============================================================================
# RESPONDENT: RENDER AND SUBMIT
# ============================================================================


@router.get("/owner/{owner_id}/{workflow_type}", response_model=QuestionnaireResponseSchema)
async def get_active_questionnaire(
    owner_id: str,
    workflow_type: WorkflowType,
    current_user: Profile = Depends(get_current_user),
    service: QuestionnaireService = Depends(get_questionnaire_service),
):
    """The owner's active questionnaire for a workflow, rendered in field order"""
    questionnaire = service.get_schema(owner_id, workflow_type)
    if not questionnaire:
        raise HTTPException(status_code=404, detail="No active questionnaire")
    return QuestionnaireResponseSchema(
        id=questionnaire.id,
        owner_id=questionnaire.owner_id,
        workflow_type=questionnaire.workflow_type,
        title=questionnaire.title,
        is_active=questionnaire.is_active,
        fields=service.render(questionnaire),
    )


@router.post("/{questionnaire_id}/responses", response_model=SubmissionResponse, status_code=201)
async def submit_questionnaire(
    questionnaire_id: str,
    data: SubmissionCreate,
    current_user: Profile = Depends(get_current_user),
    service: QuestionnaireService = Depends(get_questionnaire_service),
):
    """Store a filled questionnaire; pass the returned id to the gated action"""
    return service.submit(questionnaire_id, current_user, data.answers)
