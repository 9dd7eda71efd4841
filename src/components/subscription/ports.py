"""
Subscription component ports.

Protocol interfaces for the collaborators the workflow consumes.
"""

from __future__ import annotations

from typing import Protocol

from src.components.subscription.models import Subscriber, SubscriberDraft, SubscriberId


class SubscriberStorePort(Protocol):
    """
    Subscriber record store.

    Implementations must guarantee that concurrent creates for the same
    email never leave two live records (unique constraint or
    compare-and-set). Every method raises StoreError on failure.
    """

    def find_active_by_email(self, email: str) -> Subscriber | None:
        """Get the live (non-purged) subscriber for an email address."""
        ...

    def create(self, draft: SubscriberDraft) -> SubscriberId:
        """
        Store a new subscriber atomically.

        Raises:
            DuplicateSubscriberError: A live record already uses the email
        """
        ...

    def update_mail_active(self, subscriber_id: SubscriberId, mail_active: bool) -> None:
        """Set the newsletter opt-in flag."""
        ...

    def soft_delete(self, subscriber_id: SubscriberId) -> None:
        """Purge a subscriber (lifecycle active → purged)."""
        ...


class UnsubscribeNotifierPort(Protocol):
    """
    Administrator notification on unsubscribe.

    Failures raise NotificationError; callers treat them as non-fatal.
    """

    def send_unsubscribe_notice(self, name: str, email: str, had_groups: bool) -> None:
        """
        Tell the administrator that a subscriber left.

        Args:
            name: Subscriber's full name
            email: Subscriber's email address
            had_groups: Whether the subscriber had group memberships
                before any purge
        """
        ...


class MessageCatalogPort(Protocol):
    """Translation lookup for user-facing status messages."""

    def translate(self, key: str, locale: str | None = None) -> str | None:
        """Get the translated message, or None when the key is unknown."""
        ...

    def available_locales(self) -> list[str]:
        """Locales this catalog has messages for."""
        ...
