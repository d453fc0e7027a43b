"""Subscription domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SubscriptionCreate(BaseModel):
    owner_id: str


class SubscriptionResponse(BaseModel):
    id: str
    subscriber_id: str
    owner_id: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SubscriptionStatus(BaseModel):
    owner_id: str
    subscribed: bool
    subscriber_count: int
