from typing import Literal

from pydantic import BaseModel, Field, model_validator


class NewsletterRules(BaseModel):
    storage_pid: int | None = None
    default_locale: str = "en"
    locales_dir: str = "locale"


class MailboxRules(BaseModel):
    email: str
    name: str | None = None


class NotificationRules(BaseModel):
    enabled: bool = True
    sender: MailboxRules
    recipient: MailboxRules
    subject: str = "Newsletter unsubscribe"


class SmtpRules(BaseModel):
    host: str
    port: int = 587
    use_tls: bool = True
    timeout_seconds: float = Field(default=30.0, gt=0)
    # Names of environment variables, never the secrets themselves
    username_env: str | None = None
    password_env: str | None = None


class MailRules(BaseModel):
    transport: Literal["dev", "smtp"] = "dev"
    smtp: SmtpRules | None = None

    @model_validator(mode="after")
    def smtp_settings_present(self) -> "MailRules":
        if self.transport == "smtp" and self.smtp is None:
            raise ValueError("mail.smtp is required when mail.transport is 'smtp'")
        return self


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    newsletter: NewsletterRules = Field(default_factory=NewsletterRules)
    notifications: NotificationRules
    mail: MailRules = Field(default_factory=MailRules)
    ops: OpsRules = Field(default_factory=OpsRules)
