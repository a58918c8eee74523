"""
Farm Activity Service
=====================

Owner-driven state changes that notify the plantation owner: switching an
actuator and changing a plantation's control mode.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from farmwatch.domain.activity import describe_actuator_change, describe_mode_change
from farmwatch.domain.events import Event, EventDraft
from farmwatch.domain.exceptions import NotFoundError
from farmwatch.domain.farm import Plantation
from farmwatch.enums import ActuatorStatus, EventType, PlantationMode

if TYPE_CHECKING:
    from farmwatch.services.application.event_service import EventService
    from farmwatch.services.application.notifications_service import NotificationsService
    from infrastructure.database.repositories.farm import FarmRepository

logger = logging.getLogger(__name__)


class FarmActivityService:
    def __init__(
        self,
        farm_repo: "FarmRepository",
        event_service: "EventService",
        notifications_service: "NotificationsService",
    ):
        self._farm = farm_repo
        self._events = event_service
        self._notifications = notifications_service

    def set_actuator_status(self, actuator_id: int, status: ActuatorStatus | str) -> Event | None:
        """
        Switch an actuator on or off.

        Returns the ACTUATOR_ACTIVATED / ACTUATOR_DEACTIVATED event, or None
        when the actuator already had that status or changed concurrently.
        """
        status = ActuatorStatus(status)
        actuator = self._farm.get_actuator(actuator_id)
        if actuator is None:
            raise NotFoundError(f"Actuator {actuator_id} not found", detail={"actuator_id": actuator_id})
        if actuator.status == status:
            return None

        if not self._farm.compare_and_set_actuator_status(actuator_id, actuator.status, status):
            logger.info("Actuator %s status changed concurrently; %s not applied", actuator_id, status)
            return None

        plantation = self._farm.get_plantation(actuator.plantation_id)
        event_type = EventType.ACTUATOR_ACTIVATED if status == ActuatorStatus.ACTIVE else EventType.ACTUATOR_DEACTIVATED
        draft = EventDraft(
            event_type=event_type,
            description=describe_actuator_change(actuator, status, plantation.name if plantation else None),
            actuator_id=actuator.id,
        )
        return self._record(draft, plantation)

    def set_plantation_mode(self, plantation_id: int, mode: PlantationMode | str) -> Event | None:
        """Change the control mode; no event when the mode is unchanged."""
        mode = PlantationMode(mode)
        plantation = self._farm.get_plantation(plantation_id)
        if plantation is None:
            raise NotFoundError(f"Plantation {plantation_id} not found", detail={"plantation_id": plantation_id})
        if plantation.mode == mode:
            return None

        previous = plantation.mode
        self._farm.set_plantation_mode(plantation_id, mode)
        plantation.mode = mode

        draft = EventDraft(
            event_type=EventType.MODE_CHANGED,
            description=describe_mode_change(plantation, previous, mode),
        )
        return self._record(draft, plantation)

    def _record(self, draft: EventDraft, plantation: Plantation | None) -> Event:
        event = self._events.create_from_draft(draft)
        if plantation is not None and plantation.owner_id is not None:
            self._notifications.process_event(event, [plantation.owner_id])
        else:
            logger.warning("Event %s has no plantation owner to notify", event.id)
        return event
