"""
Unit tests for the SMTP mail transport.
smtplib.SMTP is patched; no connections are opened.
"""

import smtplib
from unittest.mock import patch

import pytest

from app.config import Settings
from app.errors import TransportError
from app.models.notification import EmailMessage
from app.services.mailer import SmtpMailer, build_message


def _message(**overrides) -> EmailMessage:
    values = {
        "sender": "orders@example.com",
        "recipients": ("a@example.com", "b@example.com"),
        "subject": "New Order: Appraisal",
        "html_body": "<p>Hello</p>",
    }
    values.update(overrides)
    return EmailMessage(**values)


def _mailer(**overrides) -> SmtpMailer:
    values = {
        "host": "smtp.example.com",
        "username": "orders@example.com",
        "password": "secret",
    }
    values.update(overrides)
    return SmtpMailer(**values)


class TestBuildMessage:

    def test_headers(self):
        mime = build_message(_message())
        assert mime["From"] == "orders@example.com"
        assert mime["To"] == "a@example.com, b@example.com"
        assert mime["Subject"] == "New Order: Appraisal"

    def test_html_utf8_body(self):
        mime = build_message(_message(html_body="<p>Café</p>"))
        assert mime.get_content_type() == "text/html"
        assert mime.get_content_charset() == "utf-8"
        assert "<p>Café</p>" in mime.get_content()


class TestSmtpMailerSend:

    def test_sends_over_starttls_on_port_587(self):
        with patch("app.services.mailer.smtplib.SMTP") as mock_smtp:
            _mailer().send(_message())

        mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=20.0)
        server = mock_smtp.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("orders@example.com", "secret")
        server.send_message.assert_called_once()
        _, kwargs = server.send_message.call_args
        assert kwargs["from_addr"] == "orders@example.com"
        assert kwargs["to_addrs"] == ["a@example.com", "b@example.com"]

    def test_smtp_error_raises_transport_error(self):
        with patch("app.services.mailer.smtplib.SMTP") as mock_smtp:
            server = mock_smtp.return_value.__enter__.return_value
            server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")

            with pytest.raises(TransportError):
                _mailer().send(_message())

    def test_connection_error_raises_transport_error(self):
        with patch("app.services.mailer.smtplib.SMTP") as mock_smtp:
            mock_smtp.side_effect = ConnectionRefusedError("refused")

            with pytest.raises(TransportError):
                _mailer().send(_message())

    def test_timeout_raises_transport_error(self):
        with patch("app.services.mailer.smtplib.SMTP") as mock_smtp:
            mock_smtp.side_effect = TimeoutError("timed out")

            with pytest.raises(TransportError):
                _mailer().send(_message())

    @pytest.mark.parametrize(
        "overrides",
        [{"username": ""}, {"password": ""}, {"host": ""}],
    )
    def test_missing_configuration_raises_without_connecting(self, overrides):
        with patch("app.services.mailer.smtplib.SMTP") as mock_smtp:
            with pytest.raises(TransportError):
                _mailer(**overrides).send(_message())

        mock_smtp.assert_not_called()

    def test_header_with_line_break_raises_transport_error_without_connecting(self):
        with patch("app.services.mailer.smtplib.SMTP") as mock_smtp:
            with pytest.raises(TransportError, match="build email"):
                _mailer().send(_message(sender="orders@example.com\r\nBcc: x@example.com"))

        mock_smtp.assert_not_called()

    def test_from_settings(self):
        settings = Settings(
            smtp_server="smtp.gmail.com",
            sender_email="orders@example.com",
            sender_password="pw",
            smtp_timeout_seconds=5,
        )
        mailer = SmtpMailer.from_settings(settings)
        assert mailer.host == "smtp.gmail.com"
        assert mailer.port == 587
        assert mailer.timeout == 5
