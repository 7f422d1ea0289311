"""Tests for outgoing mail."""

import smtplib
from unittest.mock import MagicMock, patch

from src.config import Settings
from src.services.mailer import QueuedMailer, SmtpMailer, make_reset_email


class TestMakeResetEmail:
    def test_contains_link(self):
        body = make_reset_email("http://localhost:7777/reset?resetToken=abc")
        assert 'href="http://localhost:7777/reset?resetToken=abc"' in body


class TestSmtpMailer:
    """Tests for SmtpMailer."""

    def test_sends_message(self):
        """Test that the message is handed to the SMTP server."""
        mailer = SmtpMailer(Settings(mail_host="smtp.test", mail_port=2525))

        with patch("src.services.mailer.smtplib.SMTP") as mock_smtp_cls:
            mock_smtp = MagicMock()
            mock_smtp_cls.return_value.__enter__.return_value = mock_smtp

            assert mailer.send_mail("a@example.com", "Hello", "<p>Hi</p>") is True

            mock_smtp_cls.assert_called_once_with("smtp.test", 2525, timeout=10)
            message = mock_smtp.send_message.call_args.args[0]
            assert message["To"] == "a@example.com"
            assert message["Subject"] == "Hello"
            mock_smtp.login.assert_not_called()

    def test_logs_in_with_credentials(self):
        mailer = SmtpMailer(Settings(mail_user="user", mail_password="secret"))

        with patch("src.services.mailer.smtplib.SMTP") as mock_smtp_cls:
            mock_smtp = MagicMock()
            mock_smtp_cls.return_value.__enter__.return_value = mock_smtp

            mailer.send_mail("a@example.com", "Hello", "<p>Hi</p>")

            mock_smtp.starttls.assert_called_once()
            mock_smtp.login.assert_called_once_with("user", "secret")

    def test_returns_false_on_smtp_error(self):
        """Test that delivery failures are reported, not raised."""
        mailer = SmtpMailer(Settings())

        with patch("src.services.mailer.smtplib.SMTP") as mock_smtp_cls:
            mock_smtp_cls.side_effect = smtplib.SMTPConnectError(421, "unavailable")

            assert mailer.send_mail("a@example.com", "Hello", "<p>Hi</p>") is False

    def test_returns_false_on_connection_refused(self):
        mailer = SmtpMailer(Settings())

        with patch("src.services.mailer.smtplib.SMTP") as mock_smtp_cls:
            mock_smtp_cls.side_effect = ConnectionRefusedError()

            assert mailer.send_mail("a@example.com", "Hello", "<p>Hi</p>") is False


class TestQueuedMailer:
    """Tests for QueuedMailer."""

    def test_enqueues_task(self):
        with patch("src.tasks.mail.send_email.delay") as mock_delay:
            assert QueuedMailer().send_mail("a@example.com", "Hello", "<p>Hi</p>") is True
            mock_delay.assert_called_once_with("a@example.com", "Hello", "<p>Hi</p>")

    def test_broker_failure_returns_false(self):
        with patch("src.tasks.mail.send_email.delay") as mock_delay:
            mock_delay.side_effect = ConnectionError("redis down")
            assert QueuedMailer().send_mail("a@example.com", "Hello", "<p>Hi</p>") is False


class TestSendEmailTask:
    """Tests for the send_email Celery task."""

    def test_delivers_through_smtp(self):
        from src.tasks.mail import send_email

        with patch("src.tasks.mail.SmtpMailer") as mock_mailer_cls:
            mock_mailer_cls.return_value.send_mail.return_value = True

            result = send_email.apply(args=("a@example.com", "Hello", "<p>Hi</p>")).get()

            assert result == {"status": "sent", "to": "a@example.com"}
