"""
Common Enumerations
====================

Notification delivery enums shared by the dispatcher, the channels and the
persistence layer.
"""

from enum import Enum


class NotificationChannel(str, Enum):
    """
    Delivery mechanisms a notification row can target.
    EMAIL is reserved: rows may exist in storage but no channel delivers them.
    """

    WEB = "web"
    EMAIL = "email"
    WHATSAPP = "whatsapp"

    def __str__(self) -> str:
        return self.value


class NotificationStatus(str, Enum):
    """
    Delivery outcome of a notification.
    PENDING -> SENT | ERROR; both outcomes are terminal.
    """

    PENDING = "pending"
    SENT = "sent"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value
