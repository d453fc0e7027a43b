import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    event,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Workflow types a questionnaire can gate
WORKFLOW_APPOINTMENT = "appointment"
WORKFLOW_COURSE_INTEREST = "course_interest"

# Content access levels
ACCESS_PUBLIC = "public"
ACCESS_SUBSCRIBER = "subscriber"
ACCESS_PAID = "paid"

# Connection lifecycle: (no row) -> pending -> accepted | rejected
CONNECTION_PENDING = "pending"
CONNECTION_ACCEPTED = "accepted"
CONNECTION_REJECTED = "rejected"


def generate_id():
    """Generate a UUID primary key"""
    return str(uuid.uuid4())


class Profile(Base):
    """A subject. The id is the auth provider's user id (JWT ``sub``)."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Course(Base):
    __tablename__ = "courses"

    id = Column(String(36), primary_key=True, default=generate_id)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, default=0, nullable=False)
    is_free = Column(Boolean, default=True, nullable=False)
    is_published = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    lessons = relationship("Lesson", back_populates="course", order_by="Lesson.order_index")


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(String(36), primary_key=True, default=generate_id)
    course_id = Column(String(36), ForeignKey("courses.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    order_index = Column(Integer, default=0, nullable=False)

    course = relationship("Course", back_populates="lessons")


class AppointmentSlot(Base):
    __tablename__ = "appointment_slots"

    id = Column(String(36), primary_key=True, default=generate_id)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer, nullable=True)
    rate_per_hour = Column(Float, nullable=False)
    # Flipped to False exactly once by a conditional update when booked
    is_available = Column(Boolean, default=True, nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Product(Base):
    """Commerce wrapper around a course. Slots reference their product via product_id."""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=generate_id)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    price = Column(Float, default=0, nullable=False)
    course_id = Column(String(36), ForeignKey("courses.id"), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now())


class BlogPost(Base):
    """Owner content gated by access level (public, subscriber, paid)"""

    __tablename__ = "blog_posts"

    id = Column(String(36), primary_key=True, default=generate_id)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=True)
    access_level = Column(String(20), default=ACCESS_PUBLIC, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_id)
    slot_id = Column(String(36), ForeignKey("appointment_slots.id"), nullable=False, index=True)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    requester_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    rate_per_hour = Column(Float, nullable=False)
    total_amount = Column(Float, nullable=False)
    status = Column(String(20), default="pending", nullable=False)
    questionnaire_response_id = Column(
        String(36), ForeignKey("questionnaire_responses.id"), nullable=True
    )
    created_at = Column(DateTime, server_default=func.now())

    slot = relationship("AppointmentSlot")


class Connection(Base):
    """One-directional connect request. The reverse pair is a distinct row."""

    __tablename__ = "connections"
    __table_args__ = (UniqueConstraint("requester_id", "owner_id", name="uq_connection_pair"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    requester_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    status = Column(String(20), default=CONNECTION_PENDING, nullable=False)
    created_at = Column(DateTime, server_default=func.now())


class Questionnaire(Base):
    __tablename__ = "questionnaires"
    __table_args__ = (
        UniqueConstraint("owner_id", "workflow_type", name="uq_questionnaire_owner_type"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    workflow_type = Column(String(30), nullable=False)
    title = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    fields = relationship(
        "QuestionnaireField",
        back_populates="questionnaire",
        order_by="QuestionnaireField.order_index",
        cascade="all, delete-orphan",
    )


class QuestionnaireField(Base):
    __tablename__ = "questionnaire_fields"

    id = Column(String(36), primary_key=True, default=generate_id)
    questionnaire_id = Column(
        String(36), ForeignKey("questionnaires.id"), nullable=False, index=True
    )
    field_type = Column(String(20), nullable=False)  # text, email, textarea, select, radio, checkbox
    label = Column(String(255), nullable=False)
    placeholder = Column(String(255), nullable=True)
    required = Column(Boolean, default=False, nullable=False)
    options = Column(JSON, nullable=True)  # Ordered option list for choice types
    order_index = Column(Integer, default=0, nullable=False)

    questionnaire = relationship("Questionnaire", back_populates="fields")


class QuestionnaireResponse(Base):
    """Filled questionnaire. Append-only: referenced by the action it gated."""

    __tablename__ = "questionnaire_responses"

    id = Column(String(36), primary_key=True, default=generate_id)
    questionnaire_id = Column(
        String(36), ForeignKey("questionnaires.id"), nullable=False, index=True
    )
    respondent_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    answers = Column(JSON, nullable=False)  # field id -> str | list[str]
    created_at = Column(DateTime, server_default=func.now())


@event.listens_for(QuestionnaireResponse, "before_update")
def _refuse_response_update(mapper, connection, target):
    raise ValueError(f"Questionnaire response {target.id} is immutable")


class CourseEnrollment(Base):
    __tablename__ = "course_enrollments"
    __table_args__ = (UniqueConstraint("course_id", "user_id", name="uq_enrollment_course_user"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    course_id = Column(String(36), ForeignKey("courses.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    questionnaire_response_id = Column(
        String(36), ForeignKey("questionnaire_responses.id"), nullable=True
    )
    created_at = Column(DateTime, server_default=func.now())


class CourseInterest(Base):
    __tablename__ = "course_interests"
    __table_args__ = (UniqueConstraint("course_id", "user_id", name="uq_interest_course_user"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    course_id = Column(String(36), ForeignKey("courses.id"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    questionnaire_response_id = Column(
        String(36), ForeignKey("questionnaire_responses.id"), nullable=True
    )
    created_at = Column(DateTime, server_default=func.now())


class Subscription(Base):
    """Grants subscriber-tier content access. Presence means active."""

    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "owner_id", name="uq_subscription_pair"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    subscriber_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    owner_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())
