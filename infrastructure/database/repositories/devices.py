"""Repository for sensors and their readings."""

from __future__ import annotations

from datetime import datetime

from farmwatch.domain.sensors import Sensor, SensorReading
from farmwatch.enums import SensorStatus, SensorType
from farmwatch.utils.time import to_iso, utc_now
from infrastructure.database.ops.devices import DeviceOperations


class DeviceRepository:
    """Facade over sensor persistence."""

    def __init__(self, backend: DeviceOperations) -> None:
        self._backend = backend

    # Sensors ------------------------------------------------------------------
    def create_sensor(
        self,
        *,
        plantation_id: int,
        sensor_type: SensorType,
        status: SensorStatus = SensorStatus.ACTIVE,
        min_threshold: float | None = None,
        max_threshold: float | None = None,
    ) -> int:
        return self._backend.insert_sensor(
            plantation_id=plantation_id,
            sensor_type=str(sensor_type),
            status=str(status),
            min_threshold=min_threshold,
            max_threshold=max_threshold,
        )

    def get_sensor(self, sensor_id: int) -> Sensor | None:
        row = self._backend.get_sensor(sensor_id)
        return Sensor.from_row(row) if row else None

    def list_sensors(self, plantation_id: int) -> list[Sensor]:
        return [Sensor.from_row(row) for row in self._backend.get_sensors_by_plantation(plantation_id)]

    def update_thresholds(
        self,
        sensor_id: int,
        min_threshold: float | None,
        max_threshold: float | None,
    ) -> bool:
        return self._backend.update_sensor_thresholds(sensor_id, min_threshold, max_threshold)

    def compare_and_set_status(
        self,
        sensor_id: int,
        expected: SensorStatus,
        status: SensorStatus,
    ) -> bool:
        """Write ``status`` only if the stored value is still ``expected``."""
        return self._backend.compare_and_set_sensor_status(sensor_id, str(expected), str(status))

    # Readings -----------------------------------------------------------------
    def save_reading(
        self,
        sensor_id: int,
        value: float,
        timestamp: datetime | None = None,
    ) -> SensorReading:
        timestamp = timestamp or utc_now()
        reading_id = self._backend.insert_sensor_reading(sensor_id, float(value), to_iso(timestamp))
        return SensorReading(sensor_id=sensor_id, value=float(value), timestamp=timestamp, id=reading_id)

    def get_latest_reading(self, sensor_id: int) -> SensorReading | None:
        row = self._backend.get_latest_sensor_reading(sensor_id)
        return SensorReading.from_row(row) if row else None
