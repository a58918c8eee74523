"""
Pydantic schemas for payloads leaving the process (WebSocket emits).
"""

from farmwatch.schemas.events import NotificationPayload, NotificationStatsPayload

__all__ = ["NotificationPayload", "NotificationStatsPayload"]
