"""Enrollment service - idempotent interest registration and course enrollment"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Course, CourseEnrollment, CourseInterest, Profile
from ...services.notification_service import (
    EVENT_ENROLLMENT,
    EVENT_PRODUCT_INTEREST,
    NotificationOutbox,
    OutboundEvent,
)
from ..access.schemas import Action
from ..access.service import EligibilityResolver
from .repository import EnrollmentRepository, Registration
from .schemas import RegistrationResult

logger = logging.getLogger(__name__)


class EnrollmentService:
    """
    Registers a respondent on a course, once. Repeating a registration returns
    the existing record with ``already_registered`` set instead of failing.
    """

    def __init__(self, db: Session, outbox: Optional[NotificationOutbox] = None):
        self.db = db
        self.repo = EnrollmentRepository()
        self.outbox = outbox

    def register_interest(
        self, course_id: str, respondent: Profile, questionnaire_response_id: Optional[str] = None
    ) -> RegistrationResult:
        return self._register(
            CourseInterest,
            Action.REGISTER_INTEREST,
            EVENT_PRODUCT_INTEREST,
            course_id,
            respondent,
            questionnaire_response_id,
        )

    def enroll(
        self, course_id: str, respondent: Profile, questionnaire_response_id: Optional[str] = None
    ) -> RegistrationResult:
        return self._register(
            CourseEnrollment,
            Action.ENROLL,
            EVENT_ENROLLMENT,
            course_id,
            respondent,
            questionnaire_response_id,
        )

    def _register(
        self,
        model,
        action: Action,
        event_kind: str,
        course_id: str,
        respondent: Profile,
        questionnaire_response_id: Optional[str],
    ) -> RegistrationResult:
        course = self._get_visible_course(course_id, respondent)
        if course.owner_id == respondent.id:
            raise HTTPException(status_code=403, detail="You cannot register for your own course")

        existing = self.repo.get_registration(self.db, model, course.id, respondent.id)
        if existing:
            logger.info(f"ℹ️ {respondent.id} already has a {model.__tablename__} row for {course.id}")
            return RegistrationResult(record=existing, already_registered=True)

        if action == Action.ENROLL and not course.is_free:
            raise HTTPException(
                status_code=402,
                detail="Checkout for paid courses is handled by the payments provider",
            )

        response_id = EligibilityResolver(self.db).authorize_action(
            respondent.id, course.owner_id, action, questionnaire_response_id
        )

        try:
            record = self.repo.create_registration(
                self.db, model, course.id, respondent.id, response_id
            )
        except IntegrityError:
            self.db.rollback()
            record = self._existing_after_conflict(model, course.id, respondent.id)
            logger.info(f"ℹ️ Concurrent {action.value} for {respondent.id} on {course.id} resolved")
            return RegistrationResult(record=record, already_registered=True)

        logger.info(f"✅ {action.value} recorded for {respondent.id} on course {course.id}")
        self._notify(event_kind, course, respondent)
        return RegistrationResult(record=record, already_registered=False)

    def _existing_after_conflict(self, model, course_id: str, user_id: str) -> Registration:
        record = self.repo.get_registration(self.db, model, course_id, user_id)
        if not record:
            # The constraint that fired was not the (course, user) one
            raise HTTPException(status_code=409, detail="Registration conflicts with existing data")
        return record

    def _get_visible_course(self, course_id: str, viewer: Profile) -> Course:
        course = self.repo.get_course(self.db, course_id)
        if not course or (not course.is_published and course.owner_id != viewer.id):
            raise HTTPException(status_code=404, detail="Course not found")
        return course

    def _notify(self, event_kind: str, course: Course, respondent: Profile) -> None:
        if not self.outbox:
            return
        respondent_name = respondent.name or respondent.email
        verb = "is interested in" if event_kind == EVENT_PRODUCT_INTEREST else "enrolled in"
        self.outbox.emit(
            OutboundEvent(
                kind=event_kind,
                recipient_id=course.owner_id,
                summary=f"{respondent_name} {verb} {course.title}",
                details={"respondent_name": respondent_name, "course_title": course.title},
            )
        )

    def list_my_enrollments(self, profile: Profile) -> list[CourseEnrollment]:
        return self.repo.list_for_user(self.db, CourseEnrollment, profile.id)

    def list_my_interests(self, profile: Profile) -> list[CourseInterest]:
        return self.repo.list_for_user(self.db, CourseInterest, profile.id)

    def list_course_interests(self, course_id: str, owner: Profile) -> list[CourseInterest]:
        """Interest registrations on one of the owner's courses"""
        course = self.repo.get_course(self.db, course_id)
        if not course or course.owner_id != owner.id:
            raise HTTPException(status_code=404, detail="Course not found")
        return self.repo.list_for_course(self.db, CourseInterest, course.id)
