"""Course router - FastAPI endpoints for courses"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from .schemas import CourseCreate, CourseResponse
from .service import CourseService

router = APIRouter(prefix="/courses", tags=["Courses"])


def get_course_service(db: Session = Depends(get_db)) -> CourseService:
    """Dependency injection for CourseService"""
    return CourseService(db)


@router.post("", response_model=CourseResponse, status_code=201)
async def create_course(
    data: CourseCreate,
    current_user: Profile = Depends(get_current_user),
    service: CourseService = Depends(get_course_service),
):
    return service.create_course(data, current_user)


@router.get("/owner/{owner_id}", response_model=list[CourseResponse])
async def list_owner_courses(
    owner_id: str,
    current_user: Profile = Depends(get_current_user),
    service: CourseService = Depends(get_course_service),
):
    return service.list_published(owner_id)


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(
    course_id: str,
    current_user: Profile = Depends(get_current_user),
    service: CourseService = Depends(get_course_service),
):
    return service.get_course(course_id, current_user)


@router.delete("/{course_id}")
async def delete_course(
    course_id: str,
    current_user: Profile = Depends(get_current_user),
    service: CourseService = Depends(get_course_service),
):
    """Delete a course together with its lessons, enrollments, interests and product"""
    return service.delete_course(course_id, current_user)
