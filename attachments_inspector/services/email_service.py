"""
Email Service

Sends plugin notifications to the technical contact.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from attachments_inspector.config import settings

logger = logging.getLogger(__name__)

PLUGIN_NAME = "PRC Attachments Inspector"


class EmailService:
    """Service for sending notification emails over SMTP"""

    def __init__(self):
        self.smtp_host = settings.smtp_host
        self.smtp_port = settings.smtp_port
        self.smtp_user = settings.smtp_user
        self.smtp_password = settings.smtp_password
        self.smtp_from = settings.smtp_from
        self.smtp_timeout = settings.smtp_timeout

    def _send_email(
        self,
        to_email: str | list[str],
        subject: str,
        html_body: str,
        text_body: str | None = None,
    ) -> bool:
        """
        Send an email using SMTP.

        Args:
            to_email: Recipient email address(es)
            subject: Email subject
            html_body: HTML email body
            text_body: Plain text email body (optional)

        Returns:
            bool: True if email sent successfully, False otherwise
        """
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = self.smtp_from
            msg["To"] = to_email if isinstance(to_email, str) else ", ".join(to_email)

            if text_body:
                msg.attach(MIMEText(text_body, "plain"))
            msg.attach(MIMEText(html_body, "html"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.smtp_timeout) as server:
                server.starttls()
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)

            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"Failed to send email '{subject}': {e}")
            return False

    def send_lifecycle_notification(self, event: str, site_url: str | None = None) -> bool:
        """
        Tell the technical contact the plugin was activated or deactivated.

        Args:
            event: "activated" or "deactivated"
            site_url: Site the plugin runs on (defaults to settings.site_url)

        Returns:
            bool: True if the email was handed to the SMTP server
        """
        site_url = site_url or settings.site_url
        subject = f"{PLUGIN_NAME} {event.capitalize()}"
        text_body = f"The {PLUGIN_NAME} plugin has been {event} on {site_url}"

        return self._send_email(
            to_email=settings.technical_contact,
            subject=subject,
            html_body=f"<html><body><p>{escape(text_body)}</p></body></html>",
            text_body=text_body,
        )


email_service = EmailService()
