"""Access domain schemas - decisions, tiers and actions"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, field_validator


class Decision(str, Enum):
    ALLOW = "allow"
    DENY = "deny"
    REQUIRES_QUESTIONNAIRE = "requires_questionnaire"


class AccessTier(str, Enum):
    PUBLIC = "public"
    SUBSCRIBER = "subscriber"
    PAID = "paid"


class Action(str, Enum):
    VIEW = "view"
    ENROLL = "enroll"
    REGISTER_INTEREST = "register_interest"
    BOOK = "book"


class Resolution(BaseModel):
    """Outcome of an eligibility check"""

    decision: Decision
    reason: str
    questionnaire_id: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.decision == Decision.ALLOW


class ContentResponse(BaseModel):
    id: str
    owner_id: str
    title: str
    access_level: AccessTier
    body: Optional[str] = None


class PostCreate(BaseModel):
    title: str
    body: Optional[str] = None
    access_level: AccessTier = AccessTier.PUBLIC

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()
