"""Course repository - Database operations for courses"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import (
    AppointmentSlot,
    Course,
    CourseEnrollment,
    CourseInterest,
    Lesson,
    Product,
)


class CourseRepository:
    """Repository for course database operations"""

    @staticmethod
    def get_course(db: Session, course_id: str) -> Optional[Course]:
        return db.query(Course).filter(Course.id == course_id).first()

    @staticmethod
    def get_owned_course(db: Session, course_id: str, owner_id: str) -> Optional[Course]:
        return db.query(Course).filter(Course.id == course_id, Course.owner_id == owner_id).first()

    @staticmethod
    def list_published(db: Session, owner_id: str) -> list[Course]:
        return (
            db.query(Course)
            .filter(Course.owner_id == owner_id, Course.is_published.is_(True))
            .order_by(Course.created_at.desc())
            .all()
        )

    @staticmethod
    def create_course(db: Session, owner_id: str, lesson_titles: list[str], **course_data) -> Course:
        """Insert the course, its lessons and its product in one commit"""
        course = Course(owner_id=owner_id, **course_data)
        db.add(course)
        db.flush()

        for index, title in enumerate(lesson_titles):
            db.add(Lesson(course_id=course.id, title=title, order_index=index))
        db.add(
            Product(owner_id=owner_id, name=course.title, price=course.price, course_id=course.id)
        )
        db.commit()
        db.refresh(course)
        return course

    @staticmethod
    def delete_course_tree(db: Session, course: Course) -> None:
        """Stage deletion of a course and everything hanging off it. Does not commit."""
        product_ids = [p.id for p in db.query(Product.id).filter(Product.course_id == course.id)]
        if product_ids:
            db.query(AppointmentSlot).filter(AppointmentSlot.product_id.in_(product_ids)).update(
                {AppointmentSlot.product_id: None}, synchronize_session=False
            )
            db.query(Product).filter(Product.id.in_(product_ids)).delete(synchronize_session=False)

        db.query(Lesson).filter(Lesson.course_id == course.id).delete(synchronize_session=False)
        db.query(CourseEnrollment).filter(CourseEnrollment.course_id == course.id).delete(
            synchronize_session=False
        )
        db.query(CourseInterest).filter(CourseInterest.course_id == course.id).delete(
            synchronize_session=False
        )
        db.query(Course).filter(Course.id == course.id).delete(synchronize_session=False)
