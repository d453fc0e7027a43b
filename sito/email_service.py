"""
Email Service using Resend
Sends the owner-facing notification emails behind the mail dispatch endpoint
"""

import logging
from typing import Optional, Union

import resend

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .email_templates import (
    appointment_booked_template,
    blog_post_template,
    connection_request_template,
    enrollment_template,
    new_message_template,
    product_interest_template,
)

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


class EmailServiceError(Exception):
    """Raised when an email could not be handed to the provider"""


class EmailNotConfiguredError(EmailServiceError):
    """Raised when no email provider is configured"""


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    html_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        html_content: Rendered HTML body
        from_address: Optional custom from address

    Returns:
        Send response dict
    """
    if not RESEND_API_KEY:
        logger.warning("⚠️ RESEND_API_KEY not set - email notification will not be sent")
        raise EmailNotConfiguredError("Email service not configured")

    recipients = [to] if isinstance(to, str) else to
    email_data = {
        "from": from_address or EMAIL_FROM_ADDRESS,
        "to": recipients,
        "subject": subject,
        "html": html_content,
    }

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(email_data)
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise EmailServiceError(f"Failed to send email: {str(e)}") from e


async def send_connection_request_email(to: str, requester_name: str) -> dict:
    return await send_email(
        to=to,
        subject=f"New Connection Request from {requester_name} on Sito",
        html_content=connection_request_template(requester_name),
    )


async def send_product_interest_email(to: str, respondent_name: str, course_title: str) -> dict:
    return await send_email(
        to=to,
        subject=f"{respondent_name} is interested in {course_title}",
        html_content=product_interest_template(respondent_name, course_title),
    )


async def send_enrollment_email(to: str, respondent_name: str, course_title: str) -> dict:
    return await send_email(
        to=to,
        subject=f"New enrollment in {course_title}",
        html_content=enrollment_template(respondent_name, course_title),
    )


async def send_appointment_booked_email(
    to: str, requester_name: str, start_time: str, duration_minutes: int, total_amount: float
) -> dict:
    return await send_email(
        to=to,
        subject=f"New Appointment: {requester_name} - {start_time}",
        html_content=appointment_booked_template(
            requester_name, start_time, duration_minutes, total_amount
        ),
    )


async def send_new_message_email(to: str, sender_name: str, subject: str) -> dict:
    return await send_email(
        to=to,
        subject=f"New message from {sender_name} on Sito",
        html_content=new_message_template(sender_name, subject),
    )


async def send_blog_post_email(to: str, blog_title: str, blog_post_id: str) -> dict:
    return await send_email(
        to=to,
        subject=f"New Post: {blog_title}",
        html_content=blog_post_template(blog_title, blog_post_id),
    )
