"""Celery tasks for outgoing mail."""

import logging

from src.celery_app import app as celery_app
from src.services.mailer import SmtpMailer

logger = logging.getLogger(__name__)


class MailDeliveryError(Exception):
    """Raised so Celery retries a failed delivery."""


@celery_app.task(bind=True, max_retries=3, default_retry_delay=30)
def send_email(self, to: str, subject: str, html_body: str) -> dict:
    """Deliver one email through SMTP.

    Args:
        to: Recipient address
        subject: Subject line
        html_body: HTML body

    Returns:
        dict with the delivery status
    """
    if SmtpMailer().send_mail(to, subject, html_body):
        return {"status": "sent", "to": to}

    if self.request.retries >= self.max_retries:
        logger.error(f"Giving up on mail to {to} after {self.request.retries} retries")
        return {"status": "failed", "to": to}

    raise self.retry(exc=MailDeliveryError(f"Delivery to {to} failed"))
