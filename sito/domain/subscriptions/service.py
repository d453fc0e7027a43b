"""Subscription service - follow an owner to unlock subscriber content"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Profile, Subscription
from .repository import SubscriptionRepository
from .schemas import SubscriptionStatus

logger = logging.getLogger(__name__)


class SubscriptionService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = SubscriptionRepository()

    def subscribe(self, subscriber: Profile, owner_id: str) -> Subscription:
        if owner_id == subscriber.id:
            raise HTTPException(status_code=400, detail="You cannot subscribe to yourself")
        if not self.repo.get_profile(self.db, owner_id):
            raise HTTPException(status_code=404, detail="Profile not found")
        if self.repo.get_subscription(self.db, subscriber.id, owner_id):
            raise HTTPException(status_code=409, detail="Already subscribed")

        try:
            subscription = self.repo.create_subscription(self.db, subscriber.id, owner_id)
        except IntegrityError as e:
            self.db.rollback()
            raise HTTPException(status_code=409, detail="Already subscribed") from e

        logger.info(f"✅ {subscriber.id} subscribed to {owner_id}")
        return subscription

    def unsubscribe(self, subscriber: Profile, owner_id: str) -> dict:
        subscription = self.repo.get_subscription(self.db, subscriber.id, owner_id)
        if not subscription:
            raise HTTPException(status_code=404, detail="Not subscribed")
        self.repo.delete_subscription(self.db, subscription)
        logger.info(f"✅ {subscriber.id} unsubscribed from {owner_id}")
        return {"message": "Unsubscribed"}

    def is_subscribed(self, subscriber: Profile, owner_id: str) -> bool:
        return self.repo.get_subscription(self.db, subscriber.id, owner_id) is not None

    def subscriber_count(self, owner_id: str) -> int:
        return self.repo.count_subscribers(self.db, owner_id)

    def status(self, subscriber: Profile, owner_id: str) -> SubscriptionStatus:
        return SubscriptionStatus(
            owner_id=owner_id,
            subscribed=self.is_subscribed(subscriber, owner_id),
            subscriber_count=self.subscriber_count(owner_id),
        )
