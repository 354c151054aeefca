"""Outbound email delivery for verification and reset messages."""

from __future__ import annotations

import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage
from html import escape

from .exceptions import GatewayError

logger = logging.getLogger(__name__)


class NotificationGateway(ABC):
    """Best-effort mail delivery.

    :meth:`send_mail` never raises on delivery problems; it logs them and
    returns False so callers can carry on.
    """

    def send_mail(self, to: str, subject: str, html_body: str) -> bool:
        try:
            self._deliver(to, subject, html_body)
        except GatewayError as exc:
            logger.warning("Could not deliver %r to %s: %s", subject, to, exc.description)
            return False
        return True

    @abstractmethod
    def _deliver(self, to: str, subject: str, html_body: str) -> None:
        """Send one message or raise :class:`GatewayError`."""


class SMTPNotificationGateway(NotificationGateway):
    """Deliver HTML mail through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        sender: str | None = None,
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.use_tls = use_tls
        self.timeout = timeout

    def _build_message(self, to: str, subject: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html_body, subtype="html")
        return message

    def _deliver(self, to: str, subject: str, html_body: str) -> None:
        message = self._build_message(to, subject, html_body)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as conn:
                if self.use_tls:
                    conn.starttls()
                if self.username and self.password:
                    conn.login(self.username, self.password)
                conn.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise GatewayError(str(exc)) from exc


class LoggingNotificationGateway(NotificationGateway):
    """Development gateway that writes messages to the log instead of sending them."""

    def _deliver(self, to: str, subject: str, html_body: str) -> None:
        logger.info("Mail to %s: %s", to, subject)
        logger.debug("Mail body for %s:\n%s", to, html_body)


def verification_email(code: str, frontend_url: str) -> tuple[str, str]:
    """Return the subject and HTML body of the email verification message."""

    verify_url = f"{frontend_url.rstrip('/')}/verify-email/{code}"
    body = (
        "<p>Please click the link below to verify your email address:</p>"
        f'<a href="{escape(verify_url)}">Verify Email</a>'
        f"<p>Or enter this code: <strong>{escape(code)}</strong></p>"
    )
    return "Verify your email address", body


def reset_email(code: str, token: str, frontend_url: str) -> tuple[str, str]:
    """Return the subject and HTML body of the password reset message."""

    reset_url = f"{frontend_url.rstrip('/')}/reset-password/{token}"
    body = (
        f"<p>Your password reset code is <strong>{escape(code)}</strong>.</p>"
        "<p>To reset your password, you can also click the link below:</p>"
        f'<a href="{escape(reset_url)}">Reset Password</a>'
        "<p>The code and link expire in one hour.</p>"
    )
    return "Password Reset", body
