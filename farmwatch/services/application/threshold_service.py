"""
Threshold Service
=================

Entry points of the monitoring pipeline:

- ``on_new_reading``: evaluates a stored reading against its sensor bounds
  and notifies the plantation owner of a breach;
- ``sweep_liveness``: flips sensors between active and inactive from the age
  of their latest reading, notifying the owner of every real transition;
- ``update_thresholds``: owner edits of a sensor's bounds.

Every breach produces its own event; repeated breaches are not merged.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

from farmwatch.domain.activity import describe_threshold_change
from farmwatch.domain.events import Event, EventDraft
from farmwatch.domain.exceptions import NotFoundError, ValidationError
from farmwatch.domain.farm import Plantation
from farmwatch.domain.liveness_policy import DEFAULT_STALENESS_WINDOW, describe_transition, liveness_transition
from farmwatch.domain.sensors import Sensor, SensorReading
from farmwatch.domain.threshold_policy import evaluate_reading
from farmwatch.enums import EventType, SensorStatus
from farmwatch.utils.time import utc_now

if TYPE_CHECKING:
    from farmwatch.services.application.event_service import EventService
    from farmwatch.services.application.notifications_service import NotificationsService
    from infrastructure.database.repositories.devices import DeviceRepository
    from infrastructure.database.repositories.farm import FarmRepository

logger = logging.getLogger(__name__)

LIVENESS_EVENT_TYPES = {
    SensorStatus.ACTIVE: EventType.SENSOR_ACTIVE,
    SensorStatus.INACTIVE: EventType.SENSOR_INACTIVE,
}


class ThresholdService:
    """Turns readings and sensor silence into events and notifications."""

    def __init__(
        self,
        device_repo: "DeviceRepository",
        farm_repo: "FarmRepository",
        event_service: "EventService",
        notifications_service: "NotificationsService",
        staleness_window: timedelta = DEFAULT_STALENESS_WINDOW,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._devices = device_repo
        self._farm = farm_repo
        self._events = event_service
        self._notifications = notifications_service
        self._staleness_window = staleness_window
        self._clock = clock

    # --- Readings ---

    def on_new_reading(self, sensor: Sensor, reading: SensorReading) -> Event | None:
        """
        Evaluate a reading that is already stored.

        Returns the THRESHOLD_EXCEEDED event when one was created, None when
        the reading is in range, the sensor has no bounds or its plantation
        cannot be found. Persistence errors propagate.
        """
        plantation = self._farm.get_plantation(sensor.plantation_id)
        if plantation is None:
            logger.warning("Sensor %s has no plantation %s; reading ignored", sensor.id, sensor.plantation_id)
            return None

        draft = evaluate_reading(sensor, reading, plantation.name)
        if draft is None:
            return None

        logger.info(
            "Sensor %s reading %s out of bounds [%s, %s]",
            sensor.id,
            reading.value,
            sensor.min_threshold,
            sensor.max_threshold,
        )
        return self._record(draft, plantation)

    def ingest_reading(
        self,
        sensor_id: int,
        value: float,
        timestamp: datetime | None = None,
    ) -> Event | None:
        """Store a reading, then evaluate it."""
        sensor = self._require_sensor(sensor_id)
        reading = self._devices.save_reading(sensor_id, value, timestamp)
        return self.on_new_reading(sensor, reading)

    # --- Liveness ---

    def sweep_liveness(self, plantation: Plantation) -> list[Event]:
        """
        Re-evaluate every sensor of ``plantation``.

        A status is only written when it changes, with a compare-and-set on
        the status read at the start of the sweep. A sensor whose status moved
        in between is skipped. Running the sweep twice without new readings
        creates nothing the second time.
        """
        now = self._clock()
        events: list[Event] = []

        for sensor in self._devices.list_sensors(plantation.id):
            latest = self._devices.get_latest_reading(sensor.id)
            target = liveness_transition(
                sensor,
                latest.timestamp if latest else None,
                now,
                self._staleness_window,
            )
            if target is None:
                continue

            if not self._devices.compare_and_set_status(sensor.id, sensor.status, target):
                logger.info("Sensor %s status changed concurrently; skipping %s -> %s", sensor.id, sensor.status, target)
                continue

            logger.info("Sensor %s is now %s", sensor.id, target)
            draft = EventDraft(
                event_type=LIVENESS_EVENT_TYPES[target],
                description=describe_transition(sensor, target, plantation.name, self._staleness_window),
                sensor_id=sensor.id,
            )
            events.append(self._record(draft, plantation))

        return events

    def sweep_all(self) -> list[Event]:
        """Sweep every plantation; used by the periodic liveness job."""
        events: list[Event] = []
        for plantation in self._farm.list_plantations():
            events.extend(self.sweep_liveness(plantation))
        if events:
            logger.info("Liveness sweep produced %s event(s)", len(events))
        return events

    # --- Thresholds ---

    def update_thresholds(
        self,
        sensor_id: int,
        min_threshold: float | None,
        max_threshold: float | None,
    ) -> Event:
        """
        Replace both bounds of a sensor and notify the owner.

        Raises:
            ValidationError: both bounds given and ``min_threshold >= max_threshold``.
            NotFoundError: unknown sensor.
        """
        if min_threshold is not None and max_threshold is not None and min_threshold >= max_threshold:
            raise ValidationError(
                "min_threshold must be lower than max_threshold",
                detail={"min_threshold": min_threshold, "max_threshold": max_threshold},
            )

        sensor = self._require_sensor(sensor_id)
        if not self._devices.update_thresholds(sensor_id, min_threshold, max_threshold):
            raise NotFoundError(f"Sensor {sensor_id} not found", detail={"sensor_id": sensor_id})

        sensor.min_threshold = min_threshold
        sensor.max_threshold = max_threshold
        plantation = self._farm.get_plantation(sensor.plantation_id)
        plantation_name = plantation.name if plantation else None

        draft = EventDraft(
            event_type=EventType.THRESHOLD_CHANGED,
            description=describe_threshold_change(sensor, plantation_name),
            sensor_id=sensor.id,
        )
        return self._record(draft, plantation)

    # --- Helpers ---

    def _require_sensor(self, sensor_id: int) -> Sensor:
        sensor = self._devices.get_sensor(sensor_id)
        if sensor is None:
            raise NotFoundError(f"Sensor {sensor_id} not found", detail={"sensor_id": sensor_id})
        return sensor

    def _record(self, draft: EventDraft, plantation: Plantation | None) -> Event:
        event = self._events.create_from_draft(draft)
        if plantation is None or plantation.owner_id is None:
            logger.warning("Event %s has no plantation owner to notify", event.id)
            return event
        self._notifications.process_event(event, [plantation.owner_id])
        return event
