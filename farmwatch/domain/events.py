"""
Event Domain Objects
====================

``EventDraft`` is what the pure policies produce; ``Event`` is the persisted,
immutable record the dispatcher fans out.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from farmwatch.enums import EventType
from farmwatch.utils.time import coerce_datetime, to_iso


@dataclass(frozen=True)
class EventDraft:
    """An occurrence detected but not yet persisted."""

    event_type: EventType
    description: str
    sensor_id: int | None = None
    actuator_id: int | None = None


@dataclass(frozen=True)
class Event:
    """A persisted domain event. Never updated once created."""

    id: int
    event_type: EventType
    description: str
    created_at: datetime
    sensor_id: int | None = None
    actuator_id: int | None = None

    @property
    def label(self) -> str:
        return self.event_type.label

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Event":
        return cls(
            id=row["event_id"],
            event_type=EventType(row["event_type"]),
            description=row["description"],
            created_at=coerce_datetime(row["created_at"]),
            sensor_id=row.get("sensor_id"),
            actuator_id=row.get("actuator_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.event_type.value,
            "description": self.description,
            "sensor_id": self.sensor_id,
            "actuator_id": self.actuator_id,
            "created_at": to_iso(self.created_at),
        }
