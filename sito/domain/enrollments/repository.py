"""Enrollment repository - Database operations for enrollments and interests"""

from typing import Optional, Type, Union

from sqlalchemy.orm import Session

from ...models import Course, CourseEnrollment, CourseInterest

Registration = Union[CourseEnrollment, CourseInterest]


class EnrollmentRepository:
    """Shared operations for the two registration tables"""

    @staticmethod
    def get_course(db: Session, course_id: str) -> Optional[Course]:
        return db.query(Course).filter(Course.id == course_id).first()

    @staticmethod
    def get_registration(
        db: Session, model: Type[Registration], course_id: str, user_id: str
    ) -> Optional[Registration]:
        return db.query(model).filter(model.course_id == course_id, model.user_id == user_id).first()

    @staticmethod
    def create_registration(
        db: Session,
        model: Type[Registration],
        course_id: str,
        user_id: str,
        questionnaire_response_id: Optional[str],
    ) -> Registration:
        """Insert a registration. Raises IntegrityError if one already exists."""
        record = model(
            course_id=course_id,
            user_id=user_id,
            questionnaire_response_id=questionnaire_response_id,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def list_for_user(db: Session, model: Type[Registration], user_id: str) -> list[Registration]:
        return db.query(model).filter(model.user_id == user_id).order_by(model.created_at.desc()).all()

    @staticmethod
    def list_for_course(db: Session, model: Type[Registration], course_id: str) -> list[Registration]:
        return (
            db.query(model).filter(model.course_id == course_id).order_by(model.created_at.desc()).all()
        )
