"""Outgoing mail for account notifications."""

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from src.config import Settings, get_settings

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    """Anything that can deliver an HTML email."""

    def send_mail(self, to: str, subject: str, html_body: str) -> bool: ...


def make_reset_email(reset_link: str) -> str:
    """Render the body of a password reset email."""
    return f"""
    <div className="email" style="
      border: 1px solid black;
      padding: 20px;
      font-family: sans-serif;
      line-height: 2;
      font-size: 20px;
    ">
      <h2>Hello There!</h2>
      <p>Your password reset token is here!</p>
      <p><a href="{reset_link}">Click here to reset</a></p>
      <p>This link expires in one hour.</p>
    </div>
    """


class SmtpMailer:
    """Delivers mail synchronously over SMTP."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def send_mail(self, to: str, subject: str, html_body: str) -> bool:
        """
        Send an HTML email.

        Returns True if the SMTP server accepted the message.
        """
        message = EmailMessage()
        message["From"] = self.settings.mail_from
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html_body, subtype="html")

        try:
            with smtplib.SMTP(self.settings.mail_host, self.settings.mail_port, timeout=10) as smtp:
                if self.settings.mail_user and self.settings.mail_password:
                    smtp.starttls()
                    smtp.login(self.settings.mail_user, self.settings.mail_password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send mail to {to}: {e}")
            return False

        logger.info(f"Mail sent to {to}: {subject}")
        return True


class QueuedMailer:
    """Hands mail to the Celery worker instead of sending inline."""

    def send_mail(self, to: str, subject: str, html_body: str) -> bool:
        """
        Enqueue an email for background delivery.

        Returns True if the task was accepted by the broker.
        """
        from src.tasks.mail import send_email

        try:
            send_email.delay(to, subject, html_body)
        except Exception as e:
            # Broker unavailable; the caller decides whether that matters
            logger.error(f"Failed to enqueue mail to {to}: {e}")
            return False
        return True


def get_mailer() -> Mailer:
    """Get the mailer used by API requests."""
    return QueuedMailer()
