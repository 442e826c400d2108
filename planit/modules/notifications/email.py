"""Email delivery for invites and reminders.

Sends multipart text/HTML mail through Postmark's SMTP endpoint, using the
server token as both username and password. When no token is configured every
send is skipped and reported as ``{"skipped": True}`` so callers can fall back
to sharing links by hand.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from html import escape
from typing import Dict, Optional

from planit.config import settings
from planit.core.errors import DeliveryFailure

logger = logging.getLogger(__name__)

BUTTON_STYLE = (
    "background-color: #0070f3; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 4px; display: inline-block;"
)


class EmailService:
    """Sends invite and reminder emails to trip guests."""

    def __init__(
        self,
        server_token: Optional[str] = None,
        app_url: Optional[str] = None,
        from_email: Optional[str] = None,
    ):
        self.server_token = server_token if server_token is not None else settings.postmark_server_token
        self.app_url = (app_url or settings.app_url).rstrip("/")
        self.from_email = from_email or settings.from_email
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port

    @property
    def is_configured(self) -> bool:
        return bool(self.server_token)

    def invite_url(self, invite_token: str) -> str:
        return f"{self.app_url}/invite/{invite_token}"

    def trip_url(self, slug: str) -> str:
        return f"{self.app_url}/trips/{slug}"

    def _send(self, to_email: str, subject: str, text_body: str, html_body: str) -> Dict[str, bool]:
        if not self.is_configured:
            logger.warning(f"Email not configured - skipping '{subject}' to {to_email}")
            return {"skipped": True}

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((settings.app_name, self.from_email))
        msg["To"] = to_email
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=settings.smtp_timeout_sec) as server:
                server.starttls()
                server.login(self.server_token, self.server_token)
                server.sendmail(self.from_email, [to_email], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryFailure(f"Failed to send '{subject}' to {to_email}: {e}")

        logger.info(f"Sent '{subject}' to {to_email}")
        return {"skipped": False}

    def send_invite(self, invite_token: str, trip: Dict, email: str) -> Dict[str, bool]:
        url = self.invite_url(invite_token)
        title = trip["title"]
        safe_title = escape(title)
        html = f"""
        <h2>You're invited!</h2>
        <p>You've been invited to join <strong>{safe_title}</strong>.</p>
        <p><a href="{url}" style="{BUTTON_STYLE}">Accept Invite</a></p>
        <p>Or copy this link: <a href="{url}">{url}</a></p>
        """
        text = f"You've been invited to join {title}. Accept your invite here: {url}"
        return self._send(email, f"You're invited to {title}", text, html)

    def send_rsvp_reminder(self, trip: Dict, email: str) -> Dict[str, bool]:
        url = self.trip_url(trip["slug"])
        title = trip["title"]
        safe_title = escape(title)
        html = f"""
        <h2>RSVP Reminder</h2>
        <p>Please RSVP for <strong>{safe_title}</strong>.</p>
        <p><a href="{url}" style="{BUTTON_STYLE}">RSVP Now</a></p>
        <p>Or visit: <a href="{url}">{url}</a></p>
        """
        text = f"Please RSVP for {title}. Visit: {url}"
        return self._send(email, f"RSVP needed for {title}", text, html)

    def send_deposit_reminder(self, trip: Dict, email: str, due_date: str) -> Dict[str, bool]:
        url = self.trip_url(trip["slug"])
        title = trip["title"]
        safe_title = escape(title)
        html = f"""
        <h2>Deposit Reminder</h2>
        <p>Your deposit for <strong>{safe_title}</strong> is due by {due_date}.</p>
        <p><a href="{url}" style="{BUTTON_STYLE}">View Trip &amp; Pay</a></p>
        <p>Or visit: <a href="{url}">{url}</a></p>
        """
        text = f"Your deposit for {title} is due by {due_date}. Visit: {url}"
        return self._send(email, f"Deposit due for {title}", text, html)


def get_email_service() -> EmailService:
    return EmailService()
