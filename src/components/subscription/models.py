"""
Subscription component models.

Data models for the newsletter subscribe/unsubscribe workflow.

Lifecycle: active → purged (one-way, store-owned)
Opt-in flag: mail_active (inactive ↔ active)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import ClassVar

SubscriberId = int

# Location hint used when neither the content context nor the rules name one
DEFAULT_STORAGE_PID = 1


# --- Lifecycle ---


class SubscriberLifecycle(Enum):
    """
    Record lifecycle.

    - active: visible to lookups
    - purged: soft-deleted, never returned by the store again
    """

    ACTIVE = "active"
    PURGED = "purged"


class Action(Enum):
    """Request action a submission belongs to."""

    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"


class RejectReason(Enum):
    SPAM = "spam"


# --- Entity ---


@dataclass
class Subscriber:
    """
    Frontend user record with newsletter opt-in state.

    group_ids may arrive as None from a store that never assigned groups;
    it is normalised to an empty set.
    """

    id: SubscriberId
    email: str
    first_name: str = ""
    last_name: str = ""
    mail_active: bool = True
    mail_html: bool = False
    group_ids: frozenset[int] | None = field(default_factory=frozenset)
    lifecycle: SubscriberLifecycle = SubscriberLifecycle.ACTIVE
    storage_pid: int = DEFAULT_STORAGE_PID
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        self.group_ids = frozenset(self.group_ids or ())

    @property
    def has_groups(self) -> bool:
        return bool(self.group_ids)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class SubscriberDraft:
    """New record to be created by the store; the store assigns the id."""

    email: str
    first_name: str
    last_name: str
    mail_active: bool = True
    mail_html: bool = False
    storage_pid: int = DEFAULT_STORAGE_PID


# --- Input Models ---


@dataclass(frozen=True)
class SubscribeInput:
    """Submitted subscribe form."""

    email: str
    first_name: str = ""
    last_name: str = ""
    wants_html_mail: bool = False
    honeypot: str = ""  # Hidden field, legitimate clients leave it empty
    context_storage_pid: int | None = None


@dataclass(frozen=True)
class UnsubscribeInput:
    """Submitted unsubscribe form."""

    email: str


@dataclass(frozen=True)
class ValidationError:
    """Validation error detail."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class UnsubscribeNotice:
    """Admin notice payload, captured before any purge."""

    name: str
    email: str
    had_groups: bool


# --- Subscribe Outcomes ---


@dataclass(frozen=True)
class Created:
    """No live record existed; the draft must be stored."""

    message_key: ClassVar[str] = "subscribe_success_new_user"

    draft: SubscriberDraft
    subscriber_id: SubscriberId | None = None  # Filled in once stored


@dataclass(frozen=True)
class Activated:
    """Inactive record found; caller sets mail_active = True."""

    message_key: ClassVar[str] = "subscribe_success"

    subscriber_id: SubscriberId


@dataclass(frozen=True)
class AlreadyActive:
    message_key: ClassVar[str] = "subscribe_already"

    subscriber_id: SubscriberId


@dataclass(frozen=True)
class Rejected:
    """Submission refused before any lookup."""

    message_key: ClassVar[str] = "subscribe_rejected"

    reason: RejectReason = RejectReason.SPAM


@dataclass(frozen=True)
class Invalid:
    """Required field missing or malformed."""

    action: Action
    errors: tuple[ValidationError, ...] = ()

    @property
    def message_key(self) -> str:
        return f"{self.action.value}_invalid"


# --- Unsubscribe Outcomes ---


@dataclass(frozen=True)
class Deactivated:
    """
    Live, active record found.

    The caller applies, in order: mail_active = False, soft delete when
    purge is set, then the notice when notify is set.
    """

    message_key: ClassVar[str] = "unsubscribe_success"

    subscriber_id: SubscriberId
    purge: bool
    notify: bool
    notice: UnsubscribeNotice
    notice_sent: bool | None = None  # None until the caller tried to send


@dataclass(frozen=True)
class AlreadyInactive:
    message_key: ClassVar[str] = "unsubscribe_already"

    subscriber_id: SubscriberId


@dataclass(frozen=True)
class NotFound:
    message_key: ClassVar[str] = "unsubscribe_error"


SubscribeOutcome = Created | Activated | AlreadyActive | Rejected | Invalid
UnsubscribeOutcome = Deactivated | AlreadyInactive | NotFound | Invalid


# --- Configuration ---


@dataclass(frozen=True)
class SubscriptionConfig:
    """Subscription workflow configuration."""

    storage_pid: int | None = None  # Configured default location
    notify_on_unsubscribe: bool = True


# --- Error Types ---


class SubscriptionError(Exception):
    """Base subscription error."""

    pass


class IntegrationError(SubscriptionError):
    """A collaborator (store or mailer) failed."""

    def __init__(self, collaborator: str, operation: str, reason: str) -> None:
        self.collaborator = collaborator
        self.operation = operation
        self.reason = reason
        super().__init__(f"{collaborator} failed during {operation}: {reason}")


class StoreError(IntegrationError):
    """Subscriber store operation failed."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__("store", operation, reason)


class DuplicateSubscriberError(StoreError):
    """A live record with this email already exists."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__("create", f"live subscriber already exists for '{email}'")


class NotificationError(IntegrationError):
    """Unsubscribe notice could not be delivered."""

    def __init__(self, recipient: str, reason: str) -> None:
        self.recipient = recipient
        super().__init__("notifier", "send_unsubscribe_notice", reason)
