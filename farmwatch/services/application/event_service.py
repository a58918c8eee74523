"""
Event Service
=============

Append-only store of domain events. Events are written once and never
updated; every notification references the event that caused it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from farmwatch.domain.events import Event, EventDraft
from farmwatch.domain.exceptions import NotFoundError
from farmwatch.enums import EventType

if TYPE_CHECKING:
    from infrastructure.database.repositories.events import EventRepository

logger = logging.getLogger(__name__)


class EventService:
    """Persists events produced by the policies and the activity services."""

    def __init__(self, event_repo: "EventRepository"):
        self._repo = event_repo

    def create_event(
        self,
        event_type: EventType,
        description: str,
        sensor_id: int | None = None,
        actuator_id: int | None = None,
    ) -> Event:
        """
        Persist a new event.

        Persistence failures propagate as ``RepositoryError``; nothing is
        retried here.
        """
        return self.create_from_draft(
            EventDraft(
                event_type=EventType(event_type),
                description=description,
                sensor_id=sensor_id,
                actuator_id=actuator_id,
            )
        )

    def create_from_draft(self, draft: EventDraft) -> Event:
        event = self._repo.create(draft)
        logger.info(
            "Event %s created: type=%s sensor=%s actuator=%s",
            event.id,
            event.event_type,
            event.sensor_id,
            event.actuator_id,
        )
        return event

    def get_event(self, event_id: int) -> Event:
        event = self._repo.get(event_id)
        if event is None:
            raise NotFoundError(f"Event {event_id} not found", detail={"event_id": event_id})
        return event

    def list_sensor_events(self, sensor_id: int, limit: int = 50) -> list[Event]:
        return self._repo.list_for_sensor(sensor_id, limit=limit)
