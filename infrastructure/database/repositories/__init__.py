"""Repository facades exposing typed accessors over low-level mixins."""

from infrastructure.database.repositories.devices import DeviceRepository
from infrastructure.database.repositories.events import EventRepository
from infrastructure.database.repositories.farm import FarmRepository
from infrastructure.database.repositories.notifications import NotificationRepository

__all__ = [
    "DeviceRepository",
    "EventRepository",
    "FarmRepository",
    "NotificationRepository",
]
