"""Enrollment router - FastAPI endpoints for interest and enrollment"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from ...services.notification_service import NotificationOutbox, get_outbox
from .schemas import RegistrationCreate, RegistrationResponse, RegistrationResult
from .service import EnrollmentService

router = APIRouter(prefix="/courses", tags=["Enrollments"])


def get_enrollment_service(
    db: Session = Depends(get_db), outbox: NotificationOutbox = Depends(get_outbox)
) -> EnrollmentService:
    """Dependency injection for EnrollmentService"""
    return EnrollmentService(db, outbox)


def _respond(result: RegistrationResult, response: Response) -> RegistrationResponse:
    # 201 for a new record, 200 when it already existed
    response.status_code = 200 if result.already_registered else 201
    return result.to_response()


# Declared before the /{course_id} routes so "me" is never matched as a course id
@router.get("/me/enrollments", response_model=list[RegistrationResponse])
async def list_my_enrollments(
    current_user: Profile = Depends(get_current_user),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return [
        RegistrationResult(record=r, already_registered=False).to_response()
        for r in service.list_my_enrollments(current_user)
    ]


@router.get("/me/interests", response_model=list[RegistrationResponse])
async def list_my_interests(
    current_user: Profile = Depends(get_current_user),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return [
        RegistrationResult(record=r, already_registered=False).to_response()
        for r in service.list_my_interests(current_user)
    ]


@router.post("/{course_id}/interest", response_model=RegistrationResponse, status_code=201)
async def register_interest(
    course_id: str,
    data: RegistrationCreate,
    response: Response,
    current_user: Profile = Depends(get_current_user),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    result = service.register_interest(course_id, current_user, data.questionnaire_response_id)
    return _respond(result, response)


@router.post("/{course_id}/enroll", response_model=RegistrationResponse, status_code=201)
async def enroll(
    course_id: str,
    data: RegistrationCreate,
    response: Response,
    current_user: Profile = Depends(get_current_user),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    """Enroll in a free course; paid courses go through the payments provider"""
    result = service.enroll(course_id, current_user, data.questionnaire_response_id)
    return _respond(result, response)


@router.get("/{course_id}/interests", response_model=list[RegistrationResponse])
async def list_course_interests(
    course_id: str,
    current_user: Profile = Depends(get_current_user),
    service: EnrollmentService = Depends(get_enrollment_service),
):
    return [
        RegistrationResult(record=r, already_registered=False).to_response()
        for r in service.list_course_interests(course_id, current_user)
    ]
