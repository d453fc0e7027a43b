"""
HTML Email Templates
Inline-styled templates for owner notifications
"""

from html import escape
from typing import Optional

from .config import SITE_URL

THEME = {
    "primary": "#22c55e",
    "background": "#0f1f17",
    "card_bg": "#ffffff",
    "text_primary": "#0f172a",
    "text_secondary": "#334155",
    "text_muted": "#64748b",
    "border": "#e2e8f0",
}


def get_base_template(
    title: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base HTML wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <p style="margin: 32px 0 0 0;">
          <a href="{cta_url}"
             style="background-color: {THEME['primary']}; color: #ffffff; font-weight: 600;
                    border-radius: 8px; padding: 14px 32px; text-decoration: none;">
            {cta_label}
          </a>
        </p>
        """

    return f"""
    <div style="background-color: {THEME['card_bg']}; padding: 40px; font-family: -apple-system, 'Segoe UI', Arial, sans-serif;">
      <h2 style="color: {THEME['text_primary']}; margin: 0 0 16px 0;">{title}</h2>
      <div style="color: {THEME['text_secondary']}; font-size: 16px; line-height: 1.6;">
        {content_sections}
      </div>
      {cta_section}
      <p style="color: {THEME['text_muted']}; font-size: 12px; margin-top: 40px;">
        You're receiving this because you have an account with Sito.
      </p>
    </div>
    """


def connection_request_template(requester_name: str) -> str:
    content = f"""
      <p><strong>From:</strong> {escape(requester_name)}</p>
      <p>Log in to your dashboard to accept or reject the connection request.</p>
    """
    return get_base_template(
        title="You have a new connection request!",
        content_sections=content,
        cta_url=f"{SITE_URL}/connections",
        cta_label="View Connections",
    )


def product_interest_template(respondent_name: str, course_title: str) -> str:
    content = f"""
      <p><strong>{escape(respondent_name)}</strong> registered interest in
      <strong>{escape(course_title)}</strong>.</p>
      <p>Their questionnaire answers, if any, are available in your dashboard.</p>
    """
    return get_base_template(
        title="New interest in your course",
        content_sections=content,
        cta_url=f"{SITE_URL}/learning-requests",
        cta_label="View Learning Requests",
    )


def enrollment_template(respondent_name: str, course_title: str) -> str:
    content = f"""
      <p><strong>{escape(respondent_name)}</strong> enrolled in
      <strong>{escape(course_title)}</strong>.</p>
    """
    return get_base_template(title="New course enrollment", content_sections=content)


def appointment_booked_template(
    requester_name: str, start_time: str, duration_minutes: int, total_amount: float
) -> str:
    content = f"""
      <p><strong>{escape(requester_name)}</strong> booked an appointment with you.</p>
      <p><strong>When:</strong> {escape(start_time)}<br/>
         <strong>Duration:</strong> {duration_minutes} minutes<br/>
         <strong>Total:</strong> ${total_amount:.2f}</p>
    """
    return get_base_template(
        title="New appointment booked",
        content_sections=content,
        cta_url=f"{SITE_URL}/appointments/manage",
        cta_label="Manage Appointments",
    )


def new_message_template(sender_name: str, subject: str) -> str:
    content = f"""
      <p><strong>From:</strong> {escape(sender_name)}</p>
      <p><strong>Subject:</strong> {escape(subject)}</p>
    """
    return get_base_template(
        title="You have a new message",
        content_sections=content,
        cta_url=f"{SITE_URL}/messages",
        cta_label="Open Messages",
    )


def blog_post_template(blog_title: str, blog_post_id: str) -> str:
    content = f"""
      <p>New post from an expert you follow!</p>
      <p><strong>{escape(blog_title)}</strong></p>
    """
    return get_base_template(
        title="A new post is up",
        content_sections=content,
        cta_url=f"{SITE_URL}/blog/{blog_post_id}",
        cta_label="Read Post",
    )
