"""
Sensor Liveness Policy
======================

A sensor is ACTIVE while its latest reading is younger than the staleness
window, INACTIVE once it is older. Sensors that never reported keep their
stored status.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from farmwatch.domain.sensors import Sensor
from farmwatch.domain.threshold_policy import sensor_subject
from farmwatch.enums import SensorStatus

DEFAULT_STALENESS_WINDOW = timedelta(hours=1)


def compute_liveness(
    last_reading_at: datetime | None,
    now: datetime,
    window: timedelta = DEFAULT_STALENESS_WINDOW,
) -> SensorStatus | None:
    """Return the target status, or None when there is nothing to decide on."""
    if last_reading_at is None:
        return None
    if last_reading_at < now - window:
        return SensorStatus.INACTIVE
    return SensorStatus.ACTIVE


def liveness_transition(
    sensor: Sensor,
    last_reading_at: datetime | None,
    now: datetime,
    window: timedelta = DEFAULT_STALENESS_WINDOW,
) -> SensorStatus | None:
    """Target status only when it differs from the stored one."""
    target = compute_liveness(last_reading_at, now, window)
    if target is None or target == sensor.status:
        return None
    return target


def describe_transition(
    sensor: Sensor,
    target: SensorStatus,
    plantation_name: str | None = None,
    window: timedelta = DEFAULT_STALENESS_WINDOW,
) -> str:
    """French description of a liveness change, matching the threshold wording."""
    subject = sensor_subject(sensor, plantation_name)
    if target == SensorStatus.INACTIVE:
        minutes = int(window.total_seconds() // 60)
        return f"{subject} n'a envoyé aucune lecture depuis plus de {minutes} minutes et a été marqué inactif"
    return f"{subject} a repris l'envoi de lectures et a été marqué actif"
