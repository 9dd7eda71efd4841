"""
SQLite Subscriber Store (SubscriberStorePort Implementation).

Schema lives in migrations/0001_subscribers.sql. Soft deletion is the
`deleted` column; it is mapped to SubscriberLifecycle and never leaks to
callers, because lookups only see live rows.

Concurrency: the partial unique index on email (deleted = 0) makes create
atomic with respect to other writers; a lost race surfaces as
DuplicateSubscriberError.
"""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime
from typing import Any

from src.components.subscription.models import (
    DuplicateSubscriberError,
    StoreError,
    Subscriber,
    SubscriberDraft,
    SubscriberId,
    SubscriberLifecycle,
)

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def parse_dt(s: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    return datetime.fromisoformat(s) if s else None


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None


# -----------------------------------------------------------------------------
# Subscriber Store
# -----------------------------------------------------------------------------


class SQLiteSubscriberStore(SQLiteRepoBase):
    """SQLite implementation of SubscriberStorePort."""

    def find_active_by_email(self, email: str) -> Subscriber | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute(
                    "SELECT * FROM subscribers WHERE email = ? AND deleted = 0",
                    (email,),
                ).fetchone()
                if row is None:
                    return None
                group_rows = conn.execute(
                    "SELECT group_id FROM subscriber_group_memberships WHERE subscriber_id = ?",
                    (row["id"],),
                ).fetchall()
                return self._map_row(row, {g["group_id"] for g in group_rows})
            finally:
                if self._should_close():
                    conn.close()
        except sqlite3.Error as e:
            raise StoreError("find_active_by_email", str(e)) from e

    def create(self, draft: SubscriberDraft) -> SubscriberId:
        now = datetime.now(UTC).isoformat()
        try:
            conn = self._get_conn()
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO subscribers (
                        storage_pid, email, first_name, last_name,
                        mail_active, mail_html, deleted, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?)
                    """,
                    (
                        draft.storage_pid,
                        draft.email,
                        draft.first_name,
                        draft.last_name,
                        int(draft.mail_active),
                        int(draft.mail_html),
                        now,
                        now,
                    ),
                )
                if self._should_close():
                    conn.commit()
                subscriber_id = cursor.lastrowid
            finally:
                if self._should_close():
                    conn.close()
        except sqlite3.IntegrityError as e:
            raise DuplicateSubscriberError(draft.email) from e
        except sqlite3.Error as e:
            raise StoreError("create", str(e)) from e

        if subscriber_id is None:
            raise StoreError("create", "no row id returned")
        return subscriber_id

    def update_mail_active(self, subscriber_id: SubscriberId, mail_active: bool) -> None:
        self._update_live(
            "update_mail_active",
            "UPDATE subscribers SET mail_active = ?, updated_at = ? WHERE id = ? AND deleted = 0",
            (int(mail_active), datetime.now(UTC).isoformat(), subscriber_id),
        )

    def soft_delete(self, subscriber_id: SubscriberId) -> None:
        self._update_live(
            "soft_delete",
            "UPDATE subscribers SET deleted = 1, updated_at = ? WHERE id = ? AND deleted = 0",
            (datetime.now(UTC).isoformat(), subscriber_id),
        )

    def _update_live(self, operation: str, sql: str, params: tuple[Any, ...]) -> None:
        try:
            conn = self._get_conn()
            try:
                cursor = conn.execute(sql, params)
                if self._should_close():
                    conn.commit()
                updated = cursor.rowcount
            finally:
                if self._should_close():
                    conn.close()
        except sqlite3.Error as e:
            raise StoreError(operation, str(e)) from e

        if updated == 0:
            raise StoreError(operation, f"no live subscriber with id {params[-1]}")

    def _map_row(self, row: dict[str, Any], group_ids: set[int]) -> Subscriber:
        return Subscriber(
            id=row["id"],
            email=row["email"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            mail_active=bool(row["mail_active"]),
            mail_html=bool(row["mail_html"]),
            group_ids=frozenset(group_ids),
            lifecycle=(
                SubscriberLifecycle.PURGED if row["deleted"] else SubscriberLifecycle.ACTIVE
            ),
            storage_pid=row["storage_pid"],
            created_at=parse_dt(row["created_at"]) or datetime.now(UTC),
            updated_at=parse_dt(row["updated_at"]) or datetime.now(UTC),
        )
