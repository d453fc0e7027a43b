"""Access repository - lookups behind eligibility decisions"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import BlogPost, Course, CourseEnrollment, Subscription


class AccessRepository:
    """Repository for access checks. Zero rows is a normal negative answer."""

    @staticmethod
    def has_subscription(db: Session, subscriber_id: str, owner_id: str) -> bool:
        return (
            db.query(Subscription.id)
            .filter(Subscription.subscriber_id == subscriber_id, Subscription.owner_id == owner_id)
            .first()
            is not None
        )

    @staticmethod
    def has_paid_enrollment(db: Session, user_id: str, owner_id: str) -> bool:
        """True if the user is enrolled in any non-free course of the owner"""
        return (
            db.query(CourseEnrollment.id)
            .join(Course, Course.id == CourseEnrollment.course_id)
            .filter(
                CourseEnrollment.user_id == user_id,
                Course.owner_id == owner_id,
                Course.is_free.is_(False),
            )
            .first()
            is not None
        )

    @staticmethod
    def get_post(db: Session, post_id: str) -> Optional[BlogPost]:
        return db.query(BlogPost).filter(BlogPost.id == post_id).first()

    @staticmethod
    def create_post(
        db: Session, owner_id: str, title: str, body: Optional[str], access_level: str
    ) -> BlogPost:
        post = BlogPost(owner_id=owner_id, title=title, body=body, access_level=access_level)
        db.add(post)
        db.commit()
        db.refresh(post)
        return post
