"""Repository for the append-only event log."""

from __future__ import annotations

from farmwatch.domain.events import Event, EventDraft
from infrastructure.database.ops.events import EventOperations


class EventRepository:
    def __init__(self, backend: EventOperations) -> None:
        self._backend = backend

    def create(self, draft: EventDraft) -> Event:
        row = self._backend.insert_event(
            event_type=str(draft.event_type),
            description=draft.description,
            sensor_id=draft.sensor_id,
            actuator_id=draft.actuator_id,
        )
        return Event.from_row(row)

    def get(self, event_id: int) -> Event | None:
        row = self._backend.get_event_by_id(event_id)
        return Event.from_row(row) if row else None

    def list_for_sensor(self, sensor_id: int, limit: int = 50) -> list[Event]:
        return [Event.from_row(row) for row in self._backend.get_sensor_events(sensor_id, limit=limit)]
