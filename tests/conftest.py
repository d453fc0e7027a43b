import os

# Keep the application engine off disk and quiet before sito is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sito.auth import get_current_user
from sito.database import Base, get_db
from sito.domain.questionnaires.schemas import FieldCreate, QuestionnaireCreate
from sito.domain.questionnaires.service import QuestionnaireService
from sito.main import app
from sito.models import AppointmentSlot, Course, Profile, generate_id
from sito.services.notification_service import NotificationOutbox, get_outbox

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session_factory():
    return TestingSessionLocal


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def outbox():
    """Outbox without a dispatch URL; emitted events stay in ``pending``"""
    return NotificationOutbox(endpoint=None)


@pytest.fixture
def make_profile(db):
    def _make(name="Test User"):
        profile_id = generate_id()
        profile = Profile(id=profile_id, email=f"{profile_id[:8]}@example.com", name=name)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def owner(make_profile):
    return make_profile("Olivia Owner")


@pytest.fixture
def member(make_profile):
    return make_profile("Sam Student")


@pytest.fixture
def make_course(db):
    def _make(owner, is_free=True, is_published=True, price=0, title="Intro to Pottery"):
        course = Course(
            owner_id=owner.id,
            title=title,
            price=price,
            is_free=is_free,
            is_published=is_published,
        )
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return _make


@pytest.fixture
def make_slot(db):
    def _make(owner, start=None, minutes=60, rate_per_hour=100.0, is_available=True):
        start = start or datetime.now().replace(second=0, microsecond=0) + timedelta(days=1)
        slot = AppointmentSlot(
            owner_id=owner.id,
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
            duration_minutes=minutes,
            rate_per_hour=rate_per_hour,
            is_available=is_available,
        )
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    return _make


@pytest.fixture
def make_questionnaire(db):
    """Create an active questionnaire with the given field definitions"""

    def _make(owner, workflow_type="course_interest", fields=()):
        service = QuestionnaireService(db)
        questionnaire = service.create_schema(
            QuestionnaireCreate(workflow_type=workflow_type, title="Intake"), owner
        )
        for field in fields:
            service.add_field(questionnaire.id, FieldCreate(**field), owner)
        db.refresh(questionnaire)
        return questionnaire

    return _make


@pytest.fixture
def client(db, outbox):
    """TestClient bound to the test session; call ``client.login(profile)`` to act as someone"""

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_outbox] = lambda: outbox

    test_client = TestClient(app)

    def login(profile):
        app.dependency_overrides[get_current_user] = lambda: profile

    test_client.login = login
    try:
        yield test_client
    finally:
        app.dependency_overrides.clear()
