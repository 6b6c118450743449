"""
Tests for Email Service

Tests the lifecycle notifications sent to the technical contact.
"""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from attachments_inspector.config import settings
from attachments_inspector.services.email_service import EmailService, email_service


class TestEmailService:
    """Test email service functionality"""

    @pytest.fixture
    def mock_smtp(self):
        """Mock SMTP server"""
        with patch("attachments_inspector.services.email_service.smtplib.SMTP") as mock:
            smtp_instance = MagicMock()
            mock.return_value.__enter__.return_value = smtp_instance
            yield smtp_instance

    @pytest.fixture
    def email_svc(self):
        return EmailService()

    def test_email_service_initialization(self, email_svc):
        assert email_svc.smtp_host == settings.smtp_host
        assert email_svc.smtp_port == settings.smtp_port

    def test_global_instance(self):
        assert isinstance(email_service, EmailService)

    def test_activation_notification(self, email_svc, mock_smtp):
        result = email_svc.send_lifecycle_notification("activated", site_url="https://www.pewresearch.org")

        assert result is True
        mock_smtp.starttls.assert_called_once()
        message = mock_smtp.send_message.call_args.args[0]
        assert message["Subject"] == "PRC Attachments Inspector Activated"
        assert message["To"] == settings.technical_contact
        text = message.get_payload()[0].get_payload()
        assert text == "The PRC Attachments Inspector plugin has been activated on https://www.pewresearch.org"

    def test_deactivation_notification_defaults_to_site_url(self, email_svc, mock_smtp):
        email_svc.send_lifecycle_notification("deactivated")

        message = mock_smtp.send_message.call_args.args[0]
        assert message["Subject"] == "PRC Attachments Inspector Deactivated"
        assert settings.site_url in message.get_payload()[0].get_payload()

    def test_login_when_credentials_configured(self, email_svc, mock_smtp):
        email_svc.smtp_user = "mailer"
        email_svc.smtp_password = "secret"

        email_svc.send_lifecycle_notification("activated")

        mock_smtp.login.assert_called_once_with("mailer", "secret")

    def test_smtp_failure_returns_false(self, email_svc):
        with patch("attachments_inspector.services.email_service.smtplib.SMTP") as mock:
            mock.return_value.__enter__.return_value.send_message.side_effect = smtplib.SMTPException("boom")

            assert email_svc.send_lifecycle_notification("activated") is False

    def test_connection_failure_returns_false(self, email_svc):
        with patch("attachments_inspector.services.email_service.smtplib.SMTP", side_effect=ConnectionRefusedError()):
            assert email_svc.send_lifecycle_notification("deactivated") is False

    def test_smtp_connection_uses_timeout(self, email_svc):
        with patch("attachments_inspector.services.email_service.smtplib.SMTP") as mock:
            email_svc.send_lifecycle_notification("activated")

        mock.assert_called_once_with(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout)

    def test_timeout_comes_from_settings(self):
        with patch.object(settings, "smtp_timeout", 2.5):
            assert EmailService().smtp_timeout == 2.5
