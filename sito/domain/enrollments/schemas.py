"""Enrollment domain schemas - Pydantic models for validation"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel

from ...models import CourseEnrollment, CourseInterest


class RegistrationCreate(BaseModel):
    questionnaire_response_id: Optional[str] = None


class RegistrationResponse(BaseModel):
    id: str
    course_id: str
    user_id: str
    questionnaire_response_id: Optional[str] = None
    created_at: Optional[datetime] = None
    already_registered: bool = False


@dataclass
class RegistrationResult:
    record: Union[CourseEnrollment, CourseInterest]
    already_registered: bool

    def to_response(self) -> RegistrationResponse:
        return RegistrationResponse(
            id=self.record.id,
            course_id=self.record.course_id,
            user_id=self.record.user_id,
            questionnaire_response_id=self.record.questionnaire_response_id,
            created_at=self.record.created_at,
            already_registered=self.already_registered,
        )
