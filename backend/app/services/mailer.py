"""
SMTP mail transport.

Sends one HTML email per call over STARTTLS using the sender's credentials.
Every failure, including missing configuration, is raised as TransportError so
the notifier can mark just that purchase as failed.
"""

import logging
import smtplib
from email.message import EmailMessage as MimeMessage
from typing import Protocol

from app.config import Settings
from app.errors import TransportError
from app.models.notification import EmailMessage

logger = logging.getLogger(__name__)


class MailTransport(Protocol):
    def send(self, message: EmailMessage) -> None: ...


def build_message(message: EmailMessage) -> MimeMessage:
    """Build a text/html UTF-8 MIME message with From/To/Subject set."""
    mime = MimeMessage()
    mime["From"] = message.sender
    mime["To"] = ", ".join(message.recipients)
    mime["Subject"] = message.subject
    mime.set_content(message.html_body, subtype="html", charset="utf-8")
    return mime


class SmtpMailer:
    """Sends EmailMessages through an SMTP server with STARTTLS + login."""

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        port: int = 587,
        timeout: float = 20.0,
    ):
        self.host = host
        self.username = username
        self.password = password
        self.port = port
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpMailer":
        return cls(
            host=settings.smtp_server,
            username=settings.sender_email,
            password=settings.sender_password,
            port=settings.smtp_port,
            timeout=settings.smtp_timeout_seconds,
        )

    def send(self, message: EmailMessage) -> None:
        """
        Send ``message`` to all of its recipients in one SMTP transaction.

        Raises:
            TransportError: configuration is missing, a header value is invalid,
                or the SMTP exchange failed.
        """
        if not self.username or not self.password:
            logger.error("Sender email or password does not exist")
            raise TransportError("Sender email or password does not exist")
        if not self.host:
            logger.error("SMTP server name does not exist")
            raise TransportError("SMTP server name does not exist")

        try:
            mime = build_message(message)
        except ValueError as exc:
            # header values containing CR/LF are rejected by the email package
            logger.error(f"Failed to build email message. Err: {exc}")
            raise TransportError(f"Failed to build email: {exc}") from exc

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.send_message(
                    mime,
                    from_addr=message.sender,
                    to_addrs=list(message.recipients),
                )
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(f"Failed to send email. Err: {exc}")
            raise TransportError(f"Failed to send email: {exc}") from exc
