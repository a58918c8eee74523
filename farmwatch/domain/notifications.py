"""
Notification Domain Objects
===========================

Delivery record for one (recipient, channel) pair of an event.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from farmwatch.enums import NotificationChannel, NotificationStatus
from farmwatch.utils.time import coerce_datetime, to_iso

# Channels whose notifications carry read state
READABLE_CHANNELS = frozenset({NotificationChannel.WEB, NotificationChannel.EMAIL})


@dataclass
class Notification:
    """One delivery attempt record."""

    id: int
    channel: NotificationChannel
    event_id: int
    user_id: int
    status: NotificationStatus = NotificationStatus.PENDING
    sent_at: datetime | None = None
    is_read: bool = False
    read_at: datetime | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (NotificationStatus.SENT, NotificationStatus.ERROR)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Notification":
        return cls(
            id=row["notification_id"],
            channel=NotificationChannel(row["channel"]),
            event_id=row["event_id"],
            user_id=row["user_id"],
            status=NotificationStatus(row.get("status") or NotificationStatus.PENDING),
            sent_at=coerce_datetime(row.get("sent_at")),
            is_read=bool(row.get("is_read")),
            read_at=coerce_datetime(row.get("read_at")),
            error=row.get("error"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "channel": self.channel.value,
            "status": self.status.value,
            "event_id": self.event_id,
            "user_id": self.user_id,
            "sent_at": to_iso(self.sent_at),
            "is_read": self.is_read,
            "read_at": to_iso(self.read_at),
            "error": self.error,
        }


@dataclass(frozen=True)
class NotificationStats:
    """Per-recipient counters."""

    total: int = 0
    sent: int = 0
    pending: int = 0
    error: int = 0
    unread: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "sent": self.sent,
            "pending": self.pending,
            "error": self.error,
            "unread": self.unread,
        }
