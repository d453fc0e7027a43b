"""Subscription repository - Database operations for subscriptions"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Profile, Subscription


class SubscriptionRepository:
    @staticmethod
    def get_profile(db: Session, profile_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.id == profile_id).first()

    @staticmethod
    def get_subscription(db: Session, subscriber_id: str, owner_id: str) -> Optional[Subscription]:
        return (
            db.query(Subscription)
            .filter(Subscription.subscriber_id == subscriber_id, Subscription.owner_id == owner_id)
            .first()
        )

    @staticmethod
    def create_subscription(db: Session, subscriber_id: str, owner_id: str) -> Subscription:
        """Raises IntegrityError for a duplicate pair"""
        subscription = Subscription(subscriber_id=subscriber_id, owner_id=owner_id)
        db.add(subscription)
        db.commit()
        db.refresh(subscription)
        return subscription

    @staticmethod
    def delete_subscription(db: Session, subscription: Subscription) -> None:
        db.delete(subscription)
        db.commit()

    @staticmethod
    def count_subscribers(db: Session, owner_id: str) -> int:
        return (
            db.query(func.count(Subscription.id)).filter(Subscription.owner_id == owner_id).scalar()
            or 0
        )
