"""
Enums Module
============

This module provides enumeration types for the FarmWatch application.
Enums ensure type safety and consistency across the codebase.
"""

from farmwatch.enums.common import NotificationChannel, NotificationStatus
from farmwatch.enums.device import ActuatorStatus, PlantationMode, SensorStatus, SensorType
from farmwatch.enums.events import EVENT_TYPE_LABELS, EventType, WebSocketEvent

__all__ = [
    "EVENT_TYPE_LABELS",
    "ActuatorStatus",
    "EventType",
    "NotificationChannel",
    "NotificationStatus",
    "PlantationMode",
    "SensorStatus",
    "SensorType",
    "WebSocketEvent",
]
