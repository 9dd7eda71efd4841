import sqlite3

import pytest

from src.adapters.sqlite_db import SQLiteSubscriberStore, dict_factory
from src.components.subscription import (
    DuplicateSubscriberError,
    StoreError,
    SubscriberDraft,
    SubscriberLifecycle,
)


@pytest.fixture
def store(db_path):
    return SQLiteSubscriberStore(db_path)


def draft(email="ada@example.com", **overrides):
    fields = {"email": email, "first_name": "Ada", "last_name": "Byron"}
    fields.update(overrides)
    return SubscriberDraft(**fields)


def assign_group(db_path, subscriber_id, group_id=1):
    conn = sqlite3.connect(db_path)
    conn.execute(
        "INSERT OR IGNORE INTO subscriber_groups (id, title) VALUES (?, ?)",
        (group_id, f"Group {group_id}"),
    )
    conn.execute(
        "INSERT INTO subscriber_group_memberships (subscriber_id, group_id) VALUES (?, ?)",
        (subscriber_id, group_id),
    )
    conn.commit()
    conn.close()


def test_create_and_find(store):
    subscriber_id = store.create(draft(mail_html=True, storage_pid=7))

    found = store.find_active_by_email("ada@example.com")

    assert found is not None
    assert found.id == subscriber_id
    assert found.first_name == "Ada"
    assert found.last_name == "Byron"
    assert found.mail_active is True
    assert found.mail_html is True
    assert found.storage_pid == 7
    assert found.group_ids == frozenset()
    assert found.lifecycle == SubscriberLifecycle.ACTIVE


def test_find_is_case_insensitive(store):
    store.create(draft("Ada@Example.com"))
    assert store.find_active_by_email("ada@example.COM") is not None


def test_find_unknown(store):
    assert store.find_active_by_email("nobody@example.com") is None


def test_duplicate_live_email_rejected(store):
    store.create(draft())

    with pytest.raises(DuplicateSubscriberError) as exc_info:
        store.create(draft("ADA@example.com"))

    assert exc_info.value.email == "ADA@example.com"


def test_group_ids_loaded(store, db_path):
    subscriber_id = store.create(draft())
    assign_group(db_path, subscriber_id, 1)
    assign_group(db_path, subscriber_id, 2)

    found = store.find_active_by_email("ada@example.com")

    assert found is not None
    assert found.group_ids == frozenset({1, 2})
    assert found.has_groups is True


def test_update_mail_active(store):
    subscriber_id = store.create(draft())

    store.update_mail_active(subscriber_id, False)

    found = store.find_active_by_email("ada@example.com")
    assert found is not None
    assert found.mail_active is False


def test_soft_deleted_invisible(store, db_path):
    subscriber_id = store.create(draft())

    store.soft_delete(subscriber_id)

    assert store.find_active_by_email("ada@example.com") is None
    conn = sqlite3.connect(db_path)
    row = conn.execute("SELECT deleted FROM subscribers WHERE id = ?", (subscriber_id,)).fetchone()
    conn.close()
    assert row == (1,)


def test_create_after_purge_makes_new_record(store):
    first_id = store.create(draft())
    store.soft_delete(first_id)

    second_id = store.create(draft(first_name="Augusta"))

    assert second_id != first_id
    found = store.find_active_by_email("ada@example.com")
    assert found is not None
    assert found.id == second_id
    assert found.first_name == "Augusta"


def test_writes_to_purged_record_fail(store):
    subscriber_id = store.create(draft())
    store.soft_delete(subscriber_id)

    with pytest.raises(StoreError):
        store.update_mail_active(subscriber_id, True)
    with pytest.raises(StoreError):
        store.soft_delete(subscriber_id)


def test_missing_schema_raises_store_error(tmp_path):
    store = SQLiteSubscriberStore(str(tmp_path / "empty.db"))

    with pytest.raises(StoreError) as exc_info:
        store.find_active_by_email("ada@example.com")

    assert exc_info.value.operation == "find_active_by_email"


def test_external_connection_left_uncommitted(db_path):
    conn = sqlite3.connect(db_path)
    conn.row_factory = dict_factory
    store = SQLiteSubscriberStore(db_path, connection=conn)

    subscriber_id = store.create(draft())
    assert store.find_active_by_email("ada@example.com").id == subscriber_id

    conn.rollback()
    assert store.find_active_by_email("ada@example.com") is None
    conn.close()
