"""
Email Unsubscribe Notifier (UnsubscribeNotifierPort Implementation).

Composes the plain-text administrator notice and hands it to an EmailPort.
A FAILED send result becomes a NotificationError.
"""

from __future__ import annotations

from src.components.subscription.models import NotificationError
from src.core.ports.email import EmailAddress, EmailMessage, EmailPort

DEFAULT_NOTICE_SUBJECT = "Newsletter unsubscribe"

NOTICE_TEMPLATE = (
    "A subscriber has unsubscribed from the newsletter:\n"
    "\n"
    "Name: {name}\n"
    "Email: {email}\n"
    "User groups: {groups}"
)


def build_notice_body(name: str, email: str, had_groups: bool) -> str:
    return NOTICE_TEMPLATE.format(
        name=name,
        email=email,
        groups="assigned" if had_groups else "none",
    )


class EmailUnsubscribeNotifier:
    """Sends the unsubscribe notice to a fixed administrator mailbox."""

    def __init__(
        self,
        email: EmailPort,
        sender: EmailAddress,
        recipient: EmailAddress,
        subject: str = DEFAULT_NOTICE_SUBJECT,
    ) -> None:
        self.email = email
        self.sender = sender
        self.recipient = recipient
        self.subject = subject

    def send_unsubscribe_notice(self, name: str, email: str, had_groups: bool) -> None:
        message = EmailMessage(
            recipient=self.recipient,
            sender=self.sender,
            subject=self.subject,
            body_text=build_notice_body(name, email, had_groups),
        )
        result = self.email.send(message)
        if not result.delivered:
            raise NotificationError(str(self.recipient), result.error or "send failed")
