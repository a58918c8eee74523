"""
Threshold Policy
================

Decides whether a reading falls outside its sensor's configured bounds.

The lower bound is always checked first. A value equal to a bound is in range.
The policy is pure: it builds an :class:`EventDraft` and never persists.
"""

from __future__ import annotations

from farmwatch.domain.events import EventDraft
from farmwatch.domain.sensors import Sensor, SensorReading
from farmwatch.enums import EventType


def format_number(value: float) -> str:
    """Render a numeric value without rounding; integral floats drop ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def sensor_subject(sensor: Sensor, plantation_name: str | None = None) -> str:
    """``Le capteur <type>`` optionally followed by ``du champ "<name>"``."""
    subject = f"Le capteur {sensor.sensor_type.value}"
    if plantation_name:
        subject += f' du champ "{plantation_name}"'
    return subject


def evaluate_reading(
    sensor: Sensor,
    reading: SensorReading,
    plantation_name: str | None = None,
) -> EventDraft | None:
    """
    Evaluate one reading against the sensor thresholds.

    Args:
        sensor: Sensor carrying the current thresholds.
        reading: Reading to evaluate.
        plantation_name: Optional field name embedded in the description.

    Returns:
        A THRESHOLD_EXCEEDED draft, or None when no threshold is configured or
        the value is within bounds.
    """
    if sensor.min_threshold is None and sensor.max_threshold is None:
        return None

    value = reading.value
    subject = sensor_subject(sensor, plantation_name)

    if sensor.min_threshold is not None and value < sensor.min_threshold:
        description = (
            f"{subject} a enregistré une valeur ({format_number(value)}) "
            f"inférieure au seuil minimum ({format_number(sensor.min_threshold)})"
        )
    elif sensor.max_threshold is not None and value > sensor.max_threshold:
        description = (
            f"{subject} a enregistré une valeur ({format_number(value)}) "
            f"supérieure au seuil maximum ({format_number(sensor.max_threshold)})"
        )
    else:
        return None

    return EventDraft(
        event_type=EventType.THRESHOLD_EXCEEDED,
        description=description,
        sensor_id=sensor.id,
    )
