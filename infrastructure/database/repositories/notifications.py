"""Repository for notification delivery records."""

from __future__ import annotations

from typing import Iterable

from farmwatch.domain.notifications import READABLE_CHANNELS, Notification, NotificationStats
from farmwatch.enums import NotificationChannel, NotificationStatus
from infrastructure.database.ops.notifications import NotificationOperations


def _readable_channels() -> list[str]:
    return sorted(str(channel) for channel in READABLE_CHANNELS)


class NotificationRepository:
    """Repository providing typed access to notification records."""

    def __init__(self, backend: NotificationOperations) -> None:
        self._backend = backend

    # --- Creation ---

    def create_pending(
        self,
        event_id: int,
        targets: Iterable[tuple[int, NotificationChannel]],
    ) -> list[Notification]:
        """Store one PENDING row per (user_id, channel) pair, all or nothing."""
        rows = [
            {"event_id": event_id, "user_id": user_id, "channel": str(channel)}
            for user_id, channel in targets
        ]
        return [Notification.from_row(row) for row in self._backend.create_notifications(rows)]

    # --- Status ---

    def set_status(
        self,
        notification_id: int,
        status: NotificationStatus,
        error: str | None = None,
    ) -> bool:
        return self._backend.update_notification_status(notification_id, str(status), error)

    # --- Queries ---

    def get(self, notification_id: int) -> Notification | None:
        row = self._backend.get_notification_by_id(notification_id)
        return Notification.from_row(row) if row else None

    def list_for_event(self, event_id: int) -> list[Notification]:
        return [Notification.from_row(row) for row in self._backend.get_event_notifications(event_id)]

    def list_for_user(
        self,
        user_id: int,
        *,
        unread_only: bool = False,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Notification]:
        rows = self._backend.get_user_notifications(
            user_id,
            unread_only=unread_only,
            limit=limit,
            offset=offset,
            channels=_readable_channels(),
        )
        return [Notification.from_row(row) for row in rows]

    def get_stats(self, user_id: int) -> NotificationStats:
        return NotificationStats(**self._backend.get_notification_counts(user_id, _readable_channels()))

    # --- Read tracking ---

    def mark_read(self, notification_id: int) -> bool:
        return self._backend.mark_notification_read(notification_id)

    def mark_all_read(self, user_id: int) -> int:
        return self._backend.mark_all_notifications_read(user_id, _readable_channels())

    def delete(self, notification_id: int) -> bool:
        return self._backend.delete_notification(notification_id)
