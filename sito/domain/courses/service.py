"""Course service - create, read and cascade delete"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Course, Profile
from .repository import CourseRepository
from .schemas import CourseCreate

logger = logging.getLogger(__name__)


class CourseService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CourseRepository()

    def create_course(self, data: CourseCreate, owner: Profile) -> Course:
        course = self.repo.create_course(
            self.db,
            owner.id,
            [title.strip() for title in data.lessons if title and title.strip()],
            title=data.title,
            description=data.description,
            price=data.price,
            is_free=data.is_free,
            is_published=data.is_published,
        )
        logger.info(f"✅ Created course {course.id} for {owner.id}")
        return course

    def get_course(self, course_id: str, viewer: Profile) -> Course:
        """Published courses are visible to everyone, drafts only to their owner"""
        course = self.repo.get_course(self.db, course_id)
        if not course or (not course.is_published and course.owner_id != viewer.id):
            raise HTTPException(status_code=404, detail="Course not found")
        return course

    def list_published(self, owner_id: str) -> list[Course]:
        return self.repo.list_published(self.db, owner_id)

    def delete_course(self, course_id: str, owner: Profile) -> dict:
        course = self.repo.get_owned_course(self.db, course_id, owner.id)
        if not course:
            raise HTTPException(status_code=404, detail="Course not found")

        try:
            self.repo.delete_course_tree(self.db, course)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Failed to delete course {course_id}")
            raise

        logger.info(f"🗑️ Deleted course {course_id} with its lessons, registrations and product")
        return {"message": "Course deleted"}
