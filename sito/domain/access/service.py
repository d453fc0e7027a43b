"""Eligibility resolver - decides who may view or transact on an owner's offerings"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import WORKFLOW_APPOINTMENT, WORKFLOW_COURSE_INTEREST, BlogPost, Profile
from ...services.notification_service import EVENT_BLOG_POST, NotificationOutbox, OutboundEvent
from ..questionnaires.service import QuestionnaireService
from .repository import AccessRepository
from .schemas import AccessTier, Action, Decision, PostCreate, Resolution

logger = logging.getLogger(__name__)

# Which owner questionnaire gates which action
ACTION_WORKFLOWS = {
    Action.ENROLL: WORKFLOW_COURSE_INTEREST,
    Action.REGISTER_INTEREST: WORKFLOW_COURSE_INTEREST,
    Action.BOOK: WORKFLOW_APPOINTMENT,
}

DENIED_MESSAGES = {
    AccessTier.SUBSCRIBER: "This post is available to subscribers only.",
    AccessTier.PAID: "This post is available to paid members only.",
}


class EligibilityResolver:
    """
    Rules, first match wins:

    1. the owner always has access to their own material
    2. public tier is open to everyone
    3. subscriber tier needs a subscription to the owner
    4. paid tier needs an enrollment in any non-free course of the owner
    5. transactional actions need the owner's active questionnaire, if one exists
    6. otherwise allow
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = AccessRepository()
        self.questionnaires = QuestionnaireService(db)

    def resolve(
        self,
        subject_id: str,
        owner_id: str,
        tier: Optional[AccessTier] = None,
        action: Action = Action.VIEW,
    ) -> Resolution:
        if subject_id == owner_id:
            return Resolution(decision=Decision.ALLOW, reason="owner")

        if tier == AccessTier.PUBLIC:
            return Resolution(decision=Decision.ALLOW, reason="public")

        if tier == AccessTier.SUBSCRIBER:
            if self.repo.has_subscription(self.db, subject_id, owner_id):
                return Resolution(decision=Decision.ALLOW, reason="subscriber")
            return Resolution(decision=Decision.DENY, reason="not subscribed")

        if tier == AccessTier.PAID:
            # Any paid enrollment with this owner unlocks all of the owner's paid content
            if self.repo.has_paid_enrollment(self.db, subject_id, owner_id):
                return Resolution(decision=Decision.ALLOW, reason="paid enrollment")
            return Resolution(decision=Decision.DENY, reason="no paid enrollment")

        workflow_type = ACTION_WORKFLOWS.get(action)
        if workflow_type:
            questionnaire = self.questionnaires.get_schema(owner_id, workflow_type)
            if questionnaire:
                return Resolution(
                    decision=Decision.REQUIRES_QUESTIONNAIRE,
                    reason=f"{workflow_type} questionnaire",
                    questionnaire_id=questionnaire.id,
                )

        return Resolution(decision=Decision.ALLOW, reason="unrestricted")

    def authorize_action(
        self,
        subject_id: str,
        owner_id: str,
        action: Action,
        questionnaire_response_id: Optional[str] = None,
    ) -> Optional[str]:
        """
        Gate a transactional action. Returns the questionnaire response id to
        store as provenance (None when no response was supplied).
        """
        resolution = self.resolve(subject_id, owner_id, action=action)

        if resolution.decision == Decision.DENY:
            raise HTTPException(status_code=403, detail="You do not have access to this offering")

        if resolution.decision == Decision.REQUIRES_QUESTIONNAIRE and not questionnaire_response_id:
            logger.info(f"📝 {action.value} by {subject_id} needs questionnaire {resolution.questionnaire_id}")
            raise HTTPException(
                status_code=400,
                detail={
                    "message": "Please complete the questionnaire before continuing",
                    "questionnaire_id": resolution.questionnaire_id,
                },
            )

        if questionnaire_response_id:
            self.questionnaires.verify_response(
                questionnaire_response_id,
                respondent_id=subject_id,
                owner_id=owner_id,
                questionnaire_id=resolution.questionnaire_id,
                workflow_type=ACTION_WORKFLOWS.get(action),
            )
        return questionnaire_response_id

    def read_content(self, post_id: str, subject_id: str):
        """Return a post when the subject may read it, else 403 with the tier message"""
        post = self.repo.get_post(self.db, post_id)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")

        tier = AccessTier(post.access_level)
        resolution = self.resolve(subject_id, post.owner_id, tier=tier)
        if not resolution.allowed:
            raise HTTPException(status_code=403, detail=DENIED_MESSAGES[tier])
        return post


class ContentService:
    """Publishing owner posts; subscribers hear about each new post"""

    def __init__(self, db: Session, outbox: Optional[NotificationOutbox] = None):
        self.db = db
        self.repo = AccessRepository()
        self.outbox = outbox

    def publish(self, data: PostCreate, owner: Profile) -> BlogPost:
        post = self.repo.create_post(
            self.db, owner.id, data.title, data.body, data.access_level.value
        )
        logger.info(f"✅ Published post {post.id} ({post.access_level}) for {owner.id}")

        if self.outbox:
            self.outbox.emit(
                OutboundEvent(
                    kind=EVENT_BLOG_POST,
                    recipient_id=owner.id,
                    summary=f"New post: {post.title}",
                    details={"blog_post_id": post.id, "blog_title": post.title},
                )
            )
        return post
