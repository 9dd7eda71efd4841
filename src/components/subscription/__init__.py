"""
Subscription component.

Newsletter subscribe/unsubscribe policy for frontend user records:
honeypot spam guard, activation, deactivation with purge, and an
administrator notice on unsubscribe.
"""

from src.components.subscription.component import (
    EMAIL_REGEX,
    evaluate_subscribe,
    evaluate_unsubscribe,
    normalize_email,
    precheck_subscribe,
    resolve_storage_pid,
    run,
    run_subscribe,
    run_unsubscribe,
    validate_email,
    validate_unsubscribe_input,
)
from src.components.subscription.messages import (
    FALLBACK_MESSAGES,
    MESSAGE_SEVERITY,
    FlashMessage,
    Severity,
    message_key_for,
    resolve_message,
)
from src.components.subscription.models import (
    DEFAULT_STORAGE_PID,
    Action,
    Activated,
    AlreadyActive,
    AlreadyInactive,
    Created,
    Deactivated,
    DuplicateSubscriberError,
    IntegrationError,
    Invalid,
    NotFound,
    NotificationError,
    Rejected,
    RejectReason,
    StoreError,
    SubscribeInput,
    SubscribeOutcome,
    Subscriber,
    SubscriberDraft,
    SubscriberId,
    SubscriberLifecycle,
    SubscriptionConfig,
    SubscriptionError,
    UnsubscribeInput,
    UnsubscribeNotice,
    UnsubscribeOutcome,
    ValidationError,
)
from src.components.subscription.ports import (
    MessageCatalogPort,
    SubscriberStorePort,
    UnsubscribeNotifierPort,
)

__all__ = [
    # Component
    "run",
    "run_subscribe",
    "run_unsubscribe",
    # Pure functions
    "evaluate_subscribe",
    "evaluate_unsubscribe",
    "precheck_subscribe",
    "validate_email",
    "validate_unsubscribe_input",
    "normalize_email",
    "resolve_storage_pid",
    # Messages
    "FALLBACK_MESSAGES",
    "MESSAGE_SEVERITY",
    "FlashMessage",
    "Severity",
    "message_key_for",
    "resolve_message",
    # Constants
    "DEFAULT_STORAGE_PID",
    "EMAIL_REGEX",
    # Models
    "Subscriber",
    "SubscriberDraft",
    "SubscriberId",
    "SubscriberLifecycle",
    "SubscriptionConfig",
    "UnsubscribeNotice",
    "Action",
    "RejectReason",
    # Input/Output
    "SubscribeInput",
    "UnsubscribeInput",
    "SubscribeOutcome",
    "UnsubscribeOutcome",
    "Created",
    "Activated",
    "AlreadyActive",
    "Rejected",
    "Invalid",
    "Deactivated",
    "AlreadyInactive",
    "NotFound",
    "ValidationError",
    # Errors
    "SubscriptionError",
    "IntegrationError",
    "StoreError",
    "DuplicateSubscriberError",
    "NotificationError",
    # Ports
    "SubscriberStorePort",
    "UnsubscribeNotifierPort",
    "MessageCatalogPort",
]
