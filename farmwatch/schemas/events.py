from typing import Literal

from pydantic import BaseModel, Field

NotificationChannelName = Literal["web", "email", "whatsapp"]


class NotificationPayload(BaseModel):
    """Payload for user-scoped notifications via WebSocket."""

    schema_version: int = Field(default=1)
    userId: int
    notificationId: int
    eventId: int
    eventType: str  # threshold_exceeded, sensor_inactive, etc.
    title: str
    message: str
    channel: NotificationChannelName = "web"
    event: str = "notification"  # WebSocket event name
    sensorId: int | None = None
    actuatorId: int | None = None
    timestamp: str | None = None


class NotificationStatsPayload(BaseModel):
    """Per-user notification counters pushed after read-state changes."""

    userId: int
    total: int = 0
    sent: int = 0
    pending: int = 0
    error: int = 0
    unread: int = 0
