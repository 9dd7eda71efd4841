import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from src.adapters.dev_email import DevEmailAdapter
from src.adapters.message_catalog import YamlMessageCatalog
from src.adapters.sqlite_db import SQLiteSubscriberStore
from src.app_shell.context import (
    build_email_adapter,
    build_notifier,
    build_subscription_config,
)
from src.components.subscription import (
    MessageCatalogPort,
    SubscriberStorePort,
    SubscriptionConfig,
    UnsubscribeNotifierPort,
)
from src.core.ports.email import EmailPort
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("NEWSLETTER_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "newsletter.db")
        self.migrations_dir = self.base_dir / "migrations"
        self.rules_path = Path(
            os.environ.get("NEWSLETTER_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


def get_subscription_config(rules: Rules = Depends(get_rules)) -> SubscriptionConfig:
    return build_subscription_config(rules)


# --- Store ---
def get_subscriber_store(settings: Settings = Depends(get_settings)) -> SubscriberStorePort:
    return SQLiteSubscriberStore(settings.db_path)


# --- Mail ---
# Dev adapter singleton so logged notices survive across requests
_dev_email_instance: DevEmailAdapter | None = None


def get_email_adapter(rules: Rules = Depends(get_rules)) -> EmailPort:
    global _dev_email_instance
    if rules.mail.transport == "dev":
        if _dev_email_instance is None:
            _dev_email_instance = DevEmailAdapter()
        return _dev_email_instance
    return build_email_adapter(rules)


def get_notifier(
    rules: Rules = Depends(get_rules),
    email: EmailPort = Depends(get_email_adapter),
) -> UnsubscribeNotifierPort | None:
    return build_notifier(rules, email)


# --- Messages ---
@lru_cache
def _catalog_for(locales_dir: Path, default_locale: str) -> YamlMessageCatalog:
    return YamlMessageCatalog(locales_dir, default_locale=default_locale)


def get_message_catalog(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> MessageCatalogPort:
    return _catalog_for(
        settings.base_dir / rules.newsletter.locales_dir,
        rules.newsletter.default_locale,
    )
