"""
Status messages shown after a subscribe/unsubscribe redirect.

Each outcome names a message key; the text comes from the message catalog
and falls back to the hard-coded English string below.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from src.components.subscription.models import SubscribeOutcome, UnsubscribeOutcome
from src.components.subscription.ports import MessageCatalogPort


class Severity(Enum):
    OK = "ok"
    INFO = "info"
    ERROR = "error"


FALLBACK_MESSAGES: dict[str, str] = {
    "subscribe_success": "You have successfully subscribed to the newsletter.",
    "subscribe_already": "You are already subscribed.",
    "subscribe_success_new_user": (
        "Thank you for subscribing! A new account has been created for you."
    ),
    "subscribe_rejected": "Invalid submission detected.",
    "subscribe_invalid": "Please fill in your email address, first name and last name.",
    "unsubscribe_success": "You have been unsubscribed from the newsletter.",
    "unsubscribe_already": "You are not subscribed to the newsletter.",
    "unsubscribe_error": "No subscription was found for this email address.",
    "unsubscribe_invalid": "Please enter your email address.",
    "service_unavailable": "Your request could not be processed. Please try again later.",
}

MESSAGE_SEVERITY: dict[str, Severity] = {
    "subscribe_success": Severity.OK,
    "subscribe_already": Severity.INFO,
    "subscribe_success_new_user": Severity.OK,
    "subscribe_rejected": Severity.ERROR,
    "subscribe_invalid": Severity.ERROR,
    "unsubscribe_success": Severity.OK,
    "unsubscribe_already": Severity.INFO,
    "unsubscribe_error": Severity.ERROR,
    "unsubscribe_invalid": Severity.ERROR,
    "service_unavailable": Severity.ERROR,
}


@dataclass(frozen=True)
class FlashMessage:
    """Resolved status message."""

    key: str
    text: str
    severity: Severity


def message_key_for(outcome: SubscribeOutcome | UnsubscribeOutcome) -> str:
    return outcome.message_key


def resolve_message(
    key: str,
    catalog: MessageCatalogPort | None = None,
    locale: str | None = None,
) -> FlashMessage | None:
    """
    Resolve a message key to display text.

    Returns:
        FlashMessage, or None for keys this workflow does not define
    """
    if key not in FALLBACK_MESSAGES:
        return None

    text = catalog.translate(key, locale) if catalog else None
    return FlashMessage(
        key=key,
        text=text or FALLBACK_MESSAGES[key],
        severity=MESSAGE_SEVERITY[key],
    )
