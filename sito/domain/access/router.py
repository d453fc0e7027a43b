"""Access router - eligibility decisions and gated content"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from ...services.notification_service import NotificationOutbox, get_outbox
from .schemas import AccessTier, Action, ContentResponse, PostCreate, Resolution
from .service import ContentService, EligibilityResolver

router = APIRouter(prefix="/access", tags=["Access"])
content_router = APIRouter(prefix="/content", tags=["Content"])


def get_eligibility_resolver(db: Session = Depends(get_db)) -> EligibilityResolver:
    """Dependency injection for EligibilityResolver"""
    return EligibilityResolver(db)


def get_content_service(
    db: Session = Depends(get_db), outbox: NotificationOutbox = Depends(get_outbox)
) -> ContentService:
    return ContentService(db, outbox)


@router.get("/resolve", response_model=Resolution)
async def resolve_access(
    owner_id: str,
    tier: Optional[AccessTier] = None,
    action: Action = Action.VIEW,
    current_user: Profile = Depends(get_current_user),
    resolver: EligibilityResolver = Depends(get_eligibility_resolver),
):
    """Decision for the current user on an owner's content tier or offering action"""
    return resolver.resolve(current_user.id, owner_id, tier=tier, action=action)


@content_router.post("", response_model=ContentResponse, status_code=201)
async def publish_post(
    data: PostCreate,
    current_user: Profile = Depends(get_current_user),
    service: ContentService = Depends(get_content_service),
):
    """Publish a post; the author's subscribers are emailed after the response"""
    return service.publish(data, current_user)


@content_router.get("/{post_id}", response_model=ContentResponse)
async def read_content(
    post_id: str,
    current_user: Profile = Depends(get_current_user),
    resolver: EligibilityResolver = Depends(get_eligibility_resolver),
):
    return resolver.read_content(post_id, current_user.id)
