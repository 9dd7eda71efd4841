"""
Unit tests for DevEmailAdapter.

Tests cover:
1. Status is SKIPPED (not SENT), which still counts as delivered
2. Email storage for test assertions
3. Logging of the message summary
4. Test helper methods
"""

import logging

import pytest

from src.adapters.dev_email import DevEmailAdapter, SentEmail
from src.core.ports.email import (
    EmailAddress,
    EmailMessage,
    EmailStatus,
)


@pytest.fixture
def message() -> EmailMessage:
    return EmailMessage(
        recipient=EmailAddress("admin@example.org", "Admin"),
        sender=EmailAddress("noreply@example.org"),
        subject="Newsletter unsubscribe",
        body_text="Name: Ada Byron\nEmail: ada@example.com",
    )


class TestDevEmailAdapterSend:
    def test_returns_skipped_status(self, message: EmailMessage) -> None:
        result = DevEmailAdapter().send(message)

        assert result.status == EmailStatus.SKIPPED
        assert result.delivered is True

    def test_result_includes_message_id(self, message: EmailMessage) -> None:
        result = DevEmailAdapter().send(message)

        assert result.message_id is not None
        assert result.message_id.startswith("dev-")

    def test_result_recipient_formatted(self, message: EmailMessage) -> None:
        result = DevEmailAdapter().send(message)
        assert result.recipient == '"Admin" <admin@example.org>'

    def test_stores_sent_email(self, message: EmailMessage) -> None:
        adapter = DevEmailAdapter()

        result = adapter.send(message)

        email = adapter.get_last_email()
        assert isinstance(email, SentEmail)
        assert email.id == result.message_id
        assert email.subject == "Newsletter unsubscribe"
        assert email.sender == "noreply@example.org"
        assert "Ada Byron" in email.body_text

    def test_logs_summary(
        self, message: EmailMessage, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="src.adapters.dev_email"):
            DevEmailAdapter().send(message)

        assert "EMAIL (dev)" in caplog.text
        assert "Subject=Newsletter unsubscribe" in caplog.text

    def test_body_preview_truncated(self, caplog: pytest.LogCaptureFixture) -> None:
        adapter = DevEmailAdapter(body_preview_length=5)
        long_message = EmailMessage(
            recipient=EmailAddress("a@example.org"),
            subject="S",
            body_text="0123456789",
        )

        with caplog.at_level(logging.INFO, logger="src.adapters.dev_email"):
            adapter.send(long_message)

        assert "'01234...'" in caplog.text
        assert "0123456789" not in caplog.text

    def test_body_not_logged_when_disabled(
        self, message: EmailMessage, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="src.adapters.dev_email"):
            DevEmailAdapter(log_body=False).send(message)

        assert "Body=" not in caplog.text


class TestDevEmailAdapterHelpers:
    def test_empty_adapter(self) -> None:
        adapter = DevEmailAdapter()

        assert adapter.email_count == 0
        assert adapter.get_last_email() is None

    def test_count_and_clear(self, message: EmailMessage) -> None:
        adapter = DevEmailAdapter()
        adapter.send(message)
        adapter.send(message)

        assert adapter.email_count == 2

        adapter.clear()
        assert adapter.email_count == 0


class TestEmailMessageValidation:
    def test_recipient_required(self) -> None:
        with pytest.raises(ValueError, match="Recipient"):
            EmailMessage(recipient=EmailAddress(""), subject="S", body_text="B")

    def test_subject_required(self) -> None:
        with pytest.raises(ValueError, match="Subject"):
            EmailMessage(recipient=EmailAddress("a@example.org"), subject="", body_text="B")

    def test_body_required(self) -> None:
        with pytest.raises(ValueError, match="Message body is required"):
            EmailMessage(recipient=EmailAddress("a@example.org"), subject="S", body_text="")

    def test_display_name_quotes_escaped(self) -> None:
        address = EmailAddress("a@example.org", 'The "Admin"')
        assert str(address) == '"The \\"Admin\\"" <a@example.org>'
