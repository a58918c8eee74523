"""Database operations for Notification entities."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Iterable

from farmwatch.domain.exceptions import RepositoryError
from farmwatch.utils.time import iso_now

logger = logging.getLogger(__name__)


class NotificationOperations:
    """Database operations for notification delivery records."""

    def create_notifications(self, rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Insert a batch of PENDING notifications in a single transaction.

        Each row needs ``channel``, ``event_id`` and ``user_id``. Either every
        row is stored or none is.
        """
        rows = list(rows)
        if not rows:
            return []

        db = self.get_db()
        created: list[dict[str, Any]] = []
        try:
            now = iso_now()
            for row in rows:
                cur = db.execute(
                    """
                    INSERT INTO Notification (channel, status, event_id, user_id, is_read, created_at)
                    VALUES (?, 'pending', ?, ?, 0, ?)
                    """,
                    (row["channel"], row["event_id"], row["user_id"], now),
                )
                created.append(
                    {
                        "notification_id": cur.lastrowid,
                        "channel": row["channel"],
                        "status": "pending",
                        "event_id": row["event_id"],
                        "user_id": row["user_id"],
                        "sent_at": None,
                        "is_read": 0,
                        "read_at": None,
                        "error": None,
                    }
                )
            db.commit()
            return created
        except sqlite3.Error as exc:
            db.rollback()
            logger.error("Failed to create notification batch: %s", exc)
            raise RepositoryError("Failed to create notifications") from exc

    def update_notification_status(
        self,
        notification_id: int,
        status: str,
        error: str | None = None,
    ) -> bool:
        """Record a delivery outcome. ``sent_at`` is stamped on every attempt."""
        try:
            db = self.get_db()
            cur = db.execute(
                "UPDATE Notification SET status = ?, sent_at = ?, error = ? WHERE notification_id = ?",
                (status, iso_now(), error, notification_id),
            )
            db.commit()
            return cur.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("Failed to update notification status: %s", exc)
            raise RepositoryError("Failed to update notification status") from exc

    def get_notification_by_id(self, notification_id: int) -> dict[str, Any] | None:
        try:
            db = self.get_db()
            cur = db.execute("SELECT * FROM Notification WHERE notification_id = ?", (notification_id,))
            row = cur.fetchone()
            return dict(row) if row else None
        except sqlite3.Error as exc:
            logger.error("Failed to get notification: %s", exc)
            raise RepositoryError("Failed to get notification") from exc

    def get_event_notifications(self, event_id: int) -> list[dict[str, Any]]:
        try:
            db = self.get_db()
            cur = db.execute(
                "SELECT * FROM Notification WHERE event_id = ? ORDER BY notification_id",
                (event_id,),
            )
            return [dict(row) for row in cur.fetchall()]
        except sqlite3.Error as exc:
            logger.error("Failed to get notifications for event %s: %s", event_id, exc)
            raise RepositoryError("Failed to get event notifications") from exc

    def get_user_notifications(
        self,
        user_id: int,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
        channels: Iterable[str] = (),
    ) -> list[dict[str, Any]]:
        """
        Get notifications for a user, newest first.

        With ``unread_only``, only SENT rows on ``channels`` that are not read
        yet are returned, matching the ``unread`` counter.
        """
        channels = list(channels)
        try:
            db = self.get_db()
            query = "SELECT * FROM Notification WHERE user_id = ?"
            params: list[Any] = [user_id]

            if unread_only:
                placeholders = ", ".join("?" for _ in channels)
                query += f" AND is_read = 0 AND status = 'sent' AND channel IN ({placeholders})"  # nosec B608
                params.extend(channels)

            query += " ORDER BY created_at DESC, notification_id DESC LIMIT ? OFFSET ?"
            params.extend([limit, offset])

            cur = db.execute(query, params)
            return [dict(row) for row in cur.fetchall()]
        except sqlite3.Error as exc:
            logger.error("Failed to get user notifications: %s", exc)
            raise RepositoryError("Failed to get user notifications") from exc

    def mark_notification_read(self, notification_id: int) -> bool:
        """Mark a SENT notification as read."""
        try:
            db = self.get_db()
            cur = db.execute(
                """
                UPDATE Notification SET is_read = 1, read_at = ?
                WHERE notification_id = ? AND status = 'sent' AND is_read = 0
                """,
                (iso_now(), notification_id),
            )
            db.commit()
            return cur.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("Failed to mark notification as read: %s", exc)
            raise RepositoryError("Failed to mark notification as read") from exc

    def mark_all_notifications_read(self, user_id: int, channels: Iterable[str]) -> int:
        """Mark every unread SENT notification on ``channels`` as read. Returns count updated."""
        channels = list(channels)
        try:
            db = self.get_db()
            placeholders = ", ".join("?" for _ in channels)
            cur = db.execute(
                f"""
                UPDATE Notification SET is_read = 1, read_at = ?
                WHERE user_id = ? AND is_read = 0 AND status = 'sent' AND channel IN ({placeholders})
                """,  # nosec B608
                [iso_now(), user_id, *channels],
            )
            db.commit()
            return cur.rowcount
        except sqlite3.Error as exc:
            logger.error("Failed to mark all notifications as read: %s", exc)
            raise RepositoryError("Failed to mark all notifications as read") from exc

    def get_notification_counts(self, user_id: int, channels: Iterable[str]) -> dict[str, int]:
        """Return total, per-status and unread counts; unread covers SENT rows on ``channels``."""
        channels = list(channels)
        try:
            db = self.get_db()
            placeholders = ", ".join("?" for _ in channels)
            cur = db.execute(
                f"""
                SELECT
                    COUNT(*) AS total,
                    COALESCE(SUM(CASE WHEN status = 'sent' THEN 1 ELSE 0 END), 0) AS sent,
                    COALESCE(SUM(CASE WHEN status = 'pending' THEN 1 ELSE 0 END), 0) AS pending,
                    COALESCE(SUM(CASE WHEN status = 'error' THEN 1 ELSE 0 END), 0) AS error,
                    COALESCE(SUM(CASE WHEN is_read = 0 AND status = 'sent' AND channel IN ({placeholders})
                        THEN 1 ELSE 0 END), 0) AS unread
                FROM Notification WHERE user_id = ?
                """,  # nosec B608
                [*channels, user_id],
            )
            return dict(cur.fetchone())
        except sqlite3.Error as exc:
            logger.error("Failed to count notifications: %s", exc)
            raise RepositoryError("Failed to count notifications") from exc

    def delete_notification(self, notification_id: int) -> bool:
        try:
            db = self.get_db()
            cur = db.execute(
                "DELETE FROM Notification WHERE notification_id = ?",
                (notification_id,),
            )
            db.commit()
            return cur.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("Failed to delete notification: %s", exc)
            raise RepositoryError("Failed to delete notification") from exc
