"""
End-to-end subscription flow against a real SQLite database.

Exercises the component through a ServiceContext built from rules.yaml,
with the dev email adapter capturing administrator notices.
"""

import sqlite3

from src.components.subscription import (
    Activated,
    AlreadyActive,
    AlreadyInactive,
    Created,
    Deactivated,
    NotFound,
    Rejected,
    SubscribeInput,
    UnsubscribeInput,
    resolve_message,
    run,
)


def subscribe_input(**overrides):
    fields = {"email": "ada@example.com", "first_name": "Ada", "last_name": "Byron"}
    fields.update(overrides)
    return SubscribeInput(**fields)


def execute(ctx, inp):
    return run(inp, store=ctx.store, notifier=ctx.notifier, config=ctx.config)


def test_full_lifecycle_without_groups(test_ctx, dev_email):
    created = execute(test_ctx, subscribe_input())
    assert isinstance(created, Created)
    assert created.draft.storage_pid == 1

    assert isinstance(execute(test_ctx, subscribe_input()), AlreadyActive)

    deactivated = execute(test_ctx, UnsubscribeInput("ada@example.com"))
    assert isinstance(deactivated, Deactivated)
    assert deactivated.purge is True
    assert deactivated.notice_sent is True
    assert dev_email.email_count == 1

    # Purged record is gone; re-subscribing creates a fresh one
    assert isinstance(execute(test_ctx, UnsubscribeInput("ada@example.com")), NotFound)
    again = execute(test_ctx, subscribe_input())
    assert isinstance(again, Created)
    assert again.subscriber_id != created.subscriber_id


def test_full_lifecycle_with_groups(test_ctx, db_path, dev_email):
    created = execute(test_ctx, subscribe_input())
    conn = sqlite3.connect(db_path)
    conn.execute("INSERT INTO subscriber_groups (id, title) VALUES (1, 'Members')")
    conn.execute(
        "INSERT INTO subscriber_group_memberships (subscriber_id, group_id) VALUES (?, 1)",
        (created.subscriber_id,),
    )
    conn.commit()
    conn.close()

    deactivated = execute(test_ctx, UnsubscribeInput("ada@example.com"))
    assert isinstance(deactivated, Deactivated)
    assert deactivated.purge is False
    assert "User groups: assigned" in dev_email.get_last_email().body_text

    assert isinstance(execute(test_ctx, UnsubscribeInput("ada@example.com")), AlreadyInactive)
    assert dev_email.email_count == 1

    reactivated = execute(test_ctx, subscribe_input(first_name="Other"))
    assert reactivated == Activated(subscriber_id=created.subscriber_id)
    subscriber = test_ctx.store.find_active_by_email("ada@example.com")
    assert subscriber.mail_active is True
    assert subscriber.first_name == "Ada"


def test_spam_leaves_database_untouched(test_ctx, db_path):
    outcome = execute(test_ctx, subscribe_input(honeypot="filled"))

    assert isinstance(outcome, Rejected)
    conn = sqlite3.connect(db_path)
    assert conn.execute("SELECT COUNT(*) FROM subscribers").fetchone() == (0,)
    conn.close()


def test_outcome_messages_resolve(test_ctx):
    outcome = execute(test_ctx, subscribe_input())

    flash = resolve_message(outcome.message_key, test_ctx.catalog, "de")

    assert flash is not None
    assert flash.text.startswith("Vielen Dank")
