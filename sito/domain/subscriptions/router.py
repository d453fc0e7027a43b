"""Subscription router - FastAPI endpoints for subscriptions"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from .schemas import SubscriptionCreate, SubscriptionResponse, SubscriptionStatus
from .service import SubscriptionService

router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


def get_subscription_service(db: Session = Depends(get_db)) -> SubscriptionService:
    """Dependency injection for SubscriptionService"""
    return SubscriptionService(db)


@router.post("", response_model=SubscriptionResponse, status_code=201)
async def subscribe(
    data: SubscriptionCreate,
    current_user: Profile = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.subscribe(current_user, data.owner_id)


@router.delete("/{owner_id}")
async def unsubscribe(
    owner_id: str,
    current_user: Profile = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    return service.unsubscribe(current_user, owner_id)


@router.get("/{owner_id}", response_model=SubscriptionStatus)
async def get_subscription_status(
    owner_id: str,
    current_user: Profile = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Whether the current user follows the owner, plus the owner's subscriber count"""
    return service.status(current_user, owner_id)
