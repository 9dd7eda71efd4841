"""
SMTP Email Adapter (EmailPort Implementation).

Sends plain-text messages through an SMTP relay. Delivery problems are
reported as FAILED results, never raised.
"""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage as MimeMessage
from email.utils import make_msgid

from src.core.ports.email import EmailAddress, EmailMessage, EmailResult

logger = logging.getLogger(__name__)


@dataclass
class SMTPEmailAdapter:
    """
    SMTP transport.

    Credentials are optional; without a username no login is attempted.
    """

    host: str
    port: int
    default_sender: EmailAddress
    username: str | None = None
    password: str | None = None
    use_tls: bool = True
    timeout_seconds: float = 30.0

    def send(self, message: EmailMessage) -> EmailResult:
        recipient = str(message.recipient)
        mime = self._compose(message)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as server:
                if self.use_tls:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password or "")
                server.send_message(mime)
        except smtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed for %s: %s", self.host, e)
            return EmailResult.failed(recipient, f"SMTP authentication error: {e}")
        except smtplib.SMTPException as e:
            logger.error("SMTP error sending to %s: %s", recipient, e)
            return EmailResult.failed(recipient, f"SMTP error: {e}")
        except OSError as e:
            # Connection refused, DNS failure, socket timeout
            logger.error("SMTP connection to %s:%s failed: %s", self.host, self.port, e)
            return EmailResult.failed(recipient, f"Connection error: {e}")

        return EmailResult.success(recipient, message_id=mime["Message-ID"])

    def _compose(self, message: EmailMessage) -> MimeMessage:
        mime = MimeMessage()
        mime["From"] = str(message.sender or self.default_sender)
        mime["To"] = str(message.recipient)
        mime["Subject"] = message.subject
        mime["Message-ID"] = make_msgid()
        mime.set_content(message.body_text)
        return mime
