"""
Sensor Domain Objects
=====================
Sensor entity and immutable reading value object.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from farmwatch.enums import SensorStatus, SensorType
from farmwatch.utils.time import coerce_datetime, to_iso


@dataclass
class Sensor:
    """
    One physical measurement point of a plantation.

    ``min_threshold`` and ``max_threshold`` are independently nullable. When
    both are set the owner is expected to keep ``min_threshold < max_threshold``.
    """

    id: int
    plantation_id: int
    sensor_type: SensorType
    status: SensorStatus = SensorStatus.ACTIVE
    min_threshold: float | None = None
    max_threshold: float | None = None

    @property
    def has_thresholds(self) -> bool:
        return self.min_threshold is not None or self.max_threshold is not None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Sensor":
        return cls(
            id=row["sensor_id"],
            plantation_id=row["plantation_id"],
            sensor_type=SensorType(row["sensor_type"]),
            status=SensorStatus(row.get("status") or SensorStatus.ACTIVE),
            min_threshold=row.get("min_threshold"),
            max_threshold=row.get("max_threshold"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "plantation_id": self.plantation_id,
            "sensor_type": self.sensor_type.value,
            "status": self.status.value,
            "min_threshold": self.min_threshold,
            "max_threshold": self.max_threshold,
        }


@dataclass(frozen=True)
class SensorReading:
    """
    Immutable sensor reading value object.
    Represents a single point-in-time measurement.
    """

    sensor_id: int
    value: float
    timestamp: datetime
    id: int | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "SensorReading":
        return cls(
            id=row.get("reading_id"),
            sensor_id=row["sensor_id"],
            value=row["value"],
            timestamp=coerce_datetime(row["timestamp"]),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "sensor_id": self.sensor_id,
            "value": self.value,
            "timestamp": to_iso(self.timestamp),
        }
