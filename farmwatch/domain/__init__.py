"""
Domain Layer
============
Business entities, value objects and the pure evaluation policies.
"""

from farmwatch.domain.activity import describe_actuator_change, describe_mode_change, describe_threshold_change
from farmwatch.domain.events import Event, EventDraft
from farmwatch.domain.farm import Actuator, Plantation, User
from farmwatch.domain.liveness_policy import (
    DEFAULT_STALENESS_WINDOW,
    compute_liveness,
    describe_transition,
    liveness_transition,
)
from farmwatch.domain.notifications import READABLE_CHANNELS, Notification, NotificationStats
from farmwatch.domain.sensors import Sensor, SensorReading
from farmwatch.domain.threshold_policy import evaluate_reading, format_number, sensor_subject

__all__ = [
    "DEFAULT_STALENESS_WINDOW",
    "READABLE_CHANNELS",
    "Actuator",
    "Event",
    "EventDraft",
    "Notification",
    "NotificationStats",
    "Plantation",
    "Sensor",
    "SensorReading",
    "User",
    "compute_liveness",
    "describe_actuator_change",
    "describe_mode_change",
    "describe_threshold_change",
    "describe_transition",
    "evaluate_reading",
    "format_number",
    "liveness_transition",
    "sensor_subject",
]
