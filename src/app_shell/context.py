from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from src.adapters.dev_email import DevEmailAdapter
from src.adapters.message_catalog import YamlMessageCatalog
from src.adapters.notifier import EmailUnsubscribeNotifier
from src.adapters.smtp_email import SMTPEmailAdapter
from src.adapters.sqlite_db import SQLiteSubscriberStore
from src.components.subscription import (
    MessageCatalogPort,
    SubscriberStorePort,
    SubscriptionConfig,
    UnsubscribeNotifierPort,
)
from src.core.ports.email import EmailAddress, EmailPort
from src.rules.models import Rules


def build_email_adapter(rules: Rules) -> EmailPort:
    """Pick the mail transport named in the rules."""
    sender = rules.notifications.sender
    default_sender = EmailAddress(sender.email, sender.name)

    smtp = rules.mail.smtp
    if rules.mail.transport == "smtp" and smtp is not None:
        return SMTPEmailAdapter(
            host=smtp.host,
            port=smtp.port,
            default_sender=default_sender,
            username=os.environ.get(smtp.username_env) if smtp.username_env else None,
            password=os.environ.get(smtp.password_env) if smtp.password_env else None,
            use_tls=smtp.use_tls,
            timeout_seconds=smtp.timeout_seconds,
        )
    return DevEmailAdapter()


def build_notifier(rules: Rules, email: EmailPort) -> EmailUnsubscribeNotifier | None:
    """Admin notifier, or None when notifications are disabled."""
    notifications = rules.notifications
    if not notifications.enabled:
        return None
    return EmailUnsubscribeNotifier(
        email=email,
        sender=EmailAddress(notifications.sender.email, notifications.sender.name),
        recipient=EmailAddress(notifications.recipient.email, notifications.recipient.name),
        subject=notifications.subject,
    )


def build_subscription_config(rules: Rules) -> SubscriptionConfig:
    return SubscriptionConfig(
        storage_pid=rules.newsletter.storage_pid,
        notify_on_unsubscribe=rules.notifications.enabled,
    )


@dataclass
class ServiceContext:
    store: SubscriberStorePort
    notifier: UnsubscribeNotifierPort | None
    catalog: MessageCatalogPort
    config: SubscriptionConfig
    rules: Rules

    @classmethod
    def create(
        cls,
        db_path: str,
        rules: Rules,
        base_dir: Path,
        email: EmailPort | None = None,
    ) -> ServiceContext:
        email = email or build_email_adapter(rules)
        return cls(
            store=SQLiteSubscriberStore(db_path),
            notifier=build_notifier(rules, email),
            catalog=YamlMessageCatalog(
                base_dir / rules.newsletter.locales_dir,
                default_locale=rules.newsletter.default_locale,
            ),
            config=build_subscription_config(rules),
            rules=rules,
        )
