"""
Mail dispatch endpoint

Receives the outbox's best-effort events and turns them into emails.
Without RESEND_API_KEY the request succeeds with a warning so that a missing
email provider never looks like a delivery fault.
"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .. import email_service
from ..config import MAIL_DISPATCH_KEY
from ..database import get_db
from ..email_service import EmailNotConfiguredError, EmailServiceError
from ..models import Profile, Subscription
from ..services.notification_service import (
    EVENT_APPOINTMENT,
    EVENT_BLOG_POST,
    EVENT_CONNECTION,
    EVENT_ENROLLMENT,
    EVENT_MESSAGE,
    EVENT_PRODUCT_INTEREST,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notify", tags=["Notifications"])

# Payload keys each event kind needs to render its email
REQUIRED_FIELDS = {
    EVENT_CONNECTION: ("requester_name",),
    EVENT_PRODUCT_INTEREST: ("respondent_name", "course_title"),
    EVENT_ENROLLMENT: ("respondent_name", "course_title"),
    EVENT_APPOINTMENT: ("requester_name", "start_time", "duration_minutes", "total_amount"),
    EVENT_MESSAGE: ("sender_name", "subject"),
    EVENT_BLOG_POST: ("blog_post_id", "blog_title"),
}


class NotifyRequest(BaseModel):
    # For blog-post events this is the author; their subscribers are emailed
    recipient_id: str
    summary: Optional[str] = None
    requester_name: Optional[str] = None
    respondent_name: Optional[str] = None
    course_title: Optional[str] = None
    start_time: Optional[str] = None
    duration_minutes: Optional[int] = None
    total_amount: Optional[float] = None
    sender_name: Optional[str] = None
    subject: Optional[str] = None
    blog_post_id: Optional[str] = None
    blog_title: Optional[str] = None


def verify_dispatch_key(x_dispatch_key: Optional[str] = Header(default=None)):
    """Check the shared dispatch key when one is configured"""
    if not MAIL_DISPATCH_KEY:
        return
    if not x_dispatch_key or not hmac.compare_digest(x_dispatch_key, MAIL_DISPATCH_KEY):
        raise HTTPException(status_code=401, detail="Invalid dispatch key")


async def _send(kind: str, to: str, data: NotifyRequest) -> dict:
    if kind == EVENT_CONNECTION:
        return await email_service.send_connection_request_email(to, data.requester_name)
    if kind == EVENT_PRODUCT_INTEREST:
        return await email_service.send_product_interest_email(
            to, data.respondent_name, data.course_title
        )
    if kind == EVENT_ENROLLMENT:
        return await email_service.send_enrollment_email(to, data.respondent_name, data.course_title)
    if kind == EVENT_APPOINTMENT:
        return await email_service.send_appointment_booked_email(
            to, data.requester_name, data.start_time, data.duration_minutes, data.total_amount
        )
    return await email_service.send_new_message_email(to, data.sender_name, data.subject)


async def _notify_subscribers(data: NotifyRequest, db: Session) -> dict:
    """Email every subscriber of the author; one failed recipient does not stop the rest"""
    subscribers = (
        db.query(Profile)
        .join(Subscription, Subscription.subscriber_id == Profile.id)
        .filter(Subscription.owner_id == data.recipient_id, Profile.email.isnot(None))
        .all()
    )
    if not subscribers:
        logger.info(f"ℹ️ No subscribers to notify about post {data.blog_post_id}")
        return {"success": True, "message": "No subscribers to notify", "notified": 0, "failed": []}

    notified = 0
    failed = []
    for subscriber in subscribers:
        try:
            await email_service.send_blog_post_email(
                subscriber.email, data.blog_title, data.blog_post_id
            )
        except EmailNotConfiguredError:
            logger.warning(f"⚠️ RESEND_API_KEY not set - post {data.blog_post_id} emails not sent")
            return {
                "success": True,
                "warning": "Email service not configured",
                "notified": 0,
                "failed": [],
            }
        except EmailServiceError as e:
            logger.error(f"❌ Post {data.blog_post_id} email to {subscriber.id} failed: {e}")
            failed.append({"recipient_id": subscriber.id, "error": str(e)})
            continue
        notified += 1

    logger.info(
        f"📧 Post {data.blog_post_id} sent to {notified}/{len(subscribers)} subscriber(s) of {data.recipient_id}"
    )
    return {"success": True, "notified": notified, "failed": failed}


@router.post("/{kind}", dependencies=[Depends(verify_dispatch_key)])
async def dispatch_notification(kind: str, data: NotifyRequest, db: Session = Depends(get_db)):
    """Email the recipient about a connection, interest, enrollment, appointment or message,
    or fan a new blog post out to the author's subscribers"""
    if kind not in REQUIRED_FIELDS:
        raise HTTPException(status_code=404, detail=f"Unknown notification kind: {kind}")

    missing = [name for name in REQUIRED_FIELDS[kind] if getattr(data, name) in (None, "")]
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing required fields: {', '.join(missing)}")

    if kind == EVENT_BLOG_POST:
        return await _notify_subscribers(data, db)

    recipient = db.query(Profile).filter(Profile.id == data.recipient_id).first()
    if not recipient or not recipient.email:
        raise HTTPException(status_code=404, detail="Recipient email not found")

    try:
        result = await _send(kind, recipient.email, data)
    except EmailNotConfiguredError:
        logger.warning(f"⚠️ RESEND_API_KEY not set - {kind} email to {recipient.id} not sent")
        return {"success": True, "warning": "Email service not configured"}
    except EmailServiceError as e:
        logger.error(f"❌ {kind} email to {recipient.id} failed: {e}")
        raise HTTPException(status_code=502, detail="Email provider rejected the message") from e

    logger.info(f"📧 {kind} email sent to {recipient.id}")
    return {"success": True, "id": result.get("id") if isinstance(result, dict) else None}
