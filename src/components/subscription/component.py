"""
SubscriptionPolicy component.

Functional core for newsletter subscribe/unsubscribe decisions, plus the
run handlers that apply a decision through the injected ports.

Key behaviors:
- Honeypot check precedes validation and lookup
- Existing inactive subscriber is re-activated, names untouched
- New subscriber is created active with the resolved storage pid
- Unsubscribe deactivates, purges when the subscriber has no groups,
  and notifies the administrator

Invariants:
- Pure evaluation: evaluate_* perform no I/O and hold no state
- Purge eligibility depends only on group memberships at unsubscribe time
- A notifier failure never rolls back store writes
- Store failures propagate unchanged to the caller
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace

from src.components.subscription.models import (
    DEFAULT_STORAGE_PID,
    Action,
    Activated,
    AlreadyActive,
    AlreadyInactive,
    Created,
    Deactivated,
    Invalid,
    NotFound,
    NotificationError,
    Rejected,
    RejectReason,
    SubscribeInput,
    SubscribeOutcome,
    Subscriber,
    SubscriberDraft,
    SubscriptionConfig,
    UnsubscribeInput,
    UnsubscribeNotice,
    UnsubscribeOutcome,
    ValidationError,
)
from src.components.subscription.ports import (
    SubscriberStorePort,
    UnsubscribeNotifierPort,
)

logger = logging.getLogger(__name__)

# --- Email Format (RFC 5322 simplified) ---

EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)

MAX_EMAIL_LENGTH = 254


# --- Pure Functions (Functional Core) ---


def normalize_email(email: str | None) -> str:
    """Strip surrounding whitespace; case handling is left to the store."""
    return email.strip() if email else ""


def validate_email(email: str, action: Action) -> Invalid | None:
    """
    Check that an email address is present and well-formed.

    Returns:
        Invalid outcome for the given action, or None if the email is usable
    """
    normalized = normalize_email(email)

    if not normalized:
        error = ValidationError("EMPTY_EMAIL", "Email address is required", "email")
    elif len(normalized) > MAX_EMAIL_LENGTH:
        error = ValidationError("EMAIL_TOO_LONG", "Email address is too long", "email")
    elif not EMAIL_REGEX.match(normalized):
        error = ValidationError("INVALID_FORMAT", "Invalid email format", "email")
    else:
        return None

    return Invalid(action=action, errors=(error,))


def resolve_storage_pid(
    context_pid: int | None,
    configured_pid: int | None = None,
) -> int:
    """
    Pick the location a new subscriber is stored in.

    Content context wins, then configuration, then DEFAULT_STORAGE_PID.
    Only None counts as absent.
    """
    if context_pid is not None:
        return context_pid
    if configured_pid is not None:
        return configured_pid
    return DEFAULT_STORAGE_PID


def precheck_subscribe(inp: SubscribeInput) -> Rejected | Invalid | None:
    """
    Checks that need no lookup: honeypot first, then a missing email.

    Format is not checked here; an address already in the store is
    accepted as stored.

    Returns:
        Terminal outcome, or None when the submission may proceed
    """
    if inp.honeypot:
        return Rejected(reason=RejectReason.SPAM)

    if not normalize_email(inp.email):
        return Invalid(
            action=Action.SUBSCRIBE,
            errors=(ValidationError("EMPTY_EMAIL", "Email address is required", "email"),),
        )
    return None


def evaluate_subscribe(
    lookup: Subscriber | None,
    inp: SubscribeInput,
    *,
    storage_pid: int = DEFAULT_STORAGE_PID,
) -> SubscribeOutcome:
    """
    Decide what a subscribe submission does.

    Args:
        lookup: Live subscriber with the submitted email, if any
        inp: Submitted form
        storage_pid: Location for a new record (see resolve_storage_pid)

    Returns:
        Created, Activated, AlreadyActive, Rejected or Invalid
    """
    early = precheck_subscribe(inp)
    if early is not None:
        return early

    if lookup is not None:
        if not lookup.mail_active:
            return Activated(subscriber_id=lookup.id)
        return AlreadyActive(subscriber_id=lookup.id)

    first_name = inp.first_name.strip()
    last_name = inp.last_name.strip()

    errors = []
    invalid_email = validate_email(inp.email, Action.SUBSCRIBE)
    if invalid_email is not None:
        errors.extend(invalid_email.errors)
    if not first_name:
        errors.append(ValidationError("MISSING_FIELD", "First name is required", "first_name"))
    if not last_name:
        errors.append(ValidationError("MISSING_FIELD", "Last name is required", "last_name"))
    if errors:
        return Invalid(action=Action.SUBSCRIBE, errors=tuple(errors))

    return Created(
        draft=SubscriberDraft(
            email=normalize_email(inp.email),
            first_name=first_name,
            last_name=last_name,
            mail_active=True,
            mail_html=inp.wants_html_mail,
            storage_pid=storage_pid,
        )
    )


def validate_unsubscribe_input(inp: UnsubscribeInput) -> Invalid | None:
    """Unsubscribe only needs an email; format is not enforced."""
    if not normalize_email(inp.email):
        return Invalid(
            action=Action.UNSUBSCRIBE,
            errors=(ValidationError("EMPTY_EMAIL", "Email address is required", "email"),),
        )
    return None


def evaluate_unsubscribe(lookup: Subscriber | None) -> UnsubscribeOutcome:
    """
    Decide what an unsubscribe submission does.

    Args:
        lookup: Live subscriber with the submitted email, if any

    Returns:
        NotFound, AlreadyInactive or Deactivated
    """
    if lookup is None:
        return NotFound()

    if not lookup.mail_active:
        return AlreadyInactive(subscriber_id=lookup.id)

    return Deactivated(
        subscriber_id=lookup.id,
        purge=not lookup.has_groups,
        notify=True,
        notice=UnsubscribeNotice(
            name=lookup.full_name,
            email=lookup.email,
            had_groups=lookup.has_groups,
        ),
    )


# --- Run Handlers (Imperative Shell) ---


def run_subscribe(
    inp: SubscribeInput,
    store: SubscriberStorePort,
    *,
    config: SubscriptionConfig | None = None,
) -> SubscribeOutcome:
    """
    Handle a subscribe submission and apply the outcome.

    Raises:
        StoreError: The store failed; nothing is retried
    """
    cfg = config or SubscriptionConfig()

    early = precheck_subscribe(inp)
    if early is not None:
        logger.info("Subscribe stopped before lookup: %s", type(early).__name__)
        return early

    email = normalize_email(inp.email)
    lookup = store.find_active_by_email(email)
    outcome = evaluate_subscribe(
        lookup,
        inp,
        storage_pid=resolve_storage_pid(inp.context_storage_pid, cfg.storage_pid),
    )

    if isinstance(outcome, Activated):
        store.update_mail_active(outcome.subscriber_id, True)
        logger.info("Subscriber %s re-activated", outcome.subscriber_id)
    elif isinstance(outcome, Created):
        subscriber_id = store.create(outcome.draft)
        outcome = replace(outcome, subscriber_id=subscriber_id)
        logger.info(
            "Subscriber %s created in storage pid %s",
            subscriber_id,
            outcome.draft.storage_pid,
        )
    else:
        logger.info("Subscribe outcome: %s", type(outcome).__name__)

    return outcome


def run_unsubscribe(
    inp: UnsubscribeInput,
    store: SubscriberStorePort,
    *,
    notifier: UnsubscribeNotifierPort | None = None,
    config: SubscriptionConfig | None = None,
) -> UnsubscribeOutcome:
    """
    Handle an unsubscribe submission and apply the outcome.

    Store writes happen first (deactivate, then purge); the notice is sent
    last and its failure is logged, not raised.

    Raises:
        StoreError: The store failed; nothing is retried
    """
    cfg = config or SubscriptionConfig()

    invalid = validate_unsubscribe_input(inp)
    if invalid is not None:
        return invalid

    lookup = store.find_active_by_email(normalize_email(inp.email))
    outcome = evaluate_unsubscribe(lookup)

    if not isinstance(outcome, Deactivated):
        logger.info("Unsubscribe outcome: %s", type(outcome).__name__)
        return outcome

    store.update_mail_active(outcome.subscriber_id, False)
    if outcome.purge:
        store.soft_delete(outcome.subscriber_id)
    logger.info(
        "Subscriber %s deactivated (purged=%s)",
        outcome.subscriber_id,
        outcome.purge,
    )

    if not (outcome.notify and cfg.notify_on_unsubscribe and notifier):
        return outcome

    notice = outcome.notice
    try:
        notifier.send_unsubscribe_notice(notice.name, notice.email, notice.had_groups)
    except NotificationError as e:
        logger.warning(
            "Unsubscribe notice for subscriber %s not delivered: %s",
            outcome.subscriber_id,
            e,
        )
        return replace(outcome, notice_sent=False)

    return replace(outcome, notice_sent=True)


def run(
    inp: SubscribeInput | UnsubscribeInput,
    *,
    store: SubscriberStorePort,
    notifier: UnsubscribeNotifierPort | None = None,
    config: SubscriptionConfig | None = None,
) -> SubscribeOutcome | UnsubscribeOutcome:
    """
    Main component entry point.

    Args:
        inp: Input command
        store: Subscriber store (Required)
        notifier: Unsubscribe notifier (Optional)
        config: Configuration (Optional)

    Returns:
        Operation outcome
    """
    if isinstance(inp, SubscribeInput):
        return run_subscribe(inp, store, config=config)
    elif isinstance(inp, UnsubscribeInput):
        return run_unsubscribe(inp, store, notifier=notifier, config=config)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
