"""Database operations for domain events."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from farmwatch.domain.exceptions import RepositoryError
from farmwatch.utils.time import iso_now

logger = logging.getLogger(__name__)


class EventOperations:
    """Insert-and-read access to the Event table. Events are never updated."""

    def insert_event(
        self,
        event_type: str,
        description: str,
        sensor_id: int | None = None,
        actuator_id: int | None = None,
    ) -> dict[str, Any]:
        """Insert an event and return the stored row."""
        try:
            db = self.get_db()
            created_at = iso_now()
            cur = db.execute(
                """
                INSERT INTO Event (event_type, description, sensor_id, actuator_id, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (event_type, description, sensor_id, actuator_id, created_at),
            )
            db.commit()
            return {
                "event_id": cur.lastrowid,
                "event_type": event_type,
                "description": description,
                "sensor_id": sensor_id,
                "actuator_id": actuator_id,
                "created_at": created_at,
            }
        except sqlite3.Error as exc:
            logger.error("Failed to insert event: %s", exc)
            raise RepositoryError("Failed to insert event") from exc

    def get_event_by_id(self, event_id: int) -> dict[str, Any] | None:
        try:
            db = self.get_db()
            cur = db.execute("SELECT * FROM Event WHERE event_id = ?", (event_id,))
            row = cur.fetchone()
            return dict(row) if row else None
        except sqlite3.Error as exc:
            logger.error("Failed to get event %s: %s", event_id, exc)
            raise RepositoryError("Failed to get event") from exc

    def get_sensor_events(self, sensor_id: int, limit: int = 50) -> list[dict[str, Any]]:
        try:
            db = self.get_db()
            cur = db.execute(
                "SELECT * FROM Event WHERE sensor_id = ? ORDER BY created_at DESC, event_id DESC LIMIT ?",
                (sensor_id, limit),
            )
            return [dict(row) for row in cur.fetchall()]
        except sqlite3.Error as exc:
            logger.error("Failed to get events for sensor %s: %s", sensor_id, exc)
            raise RepositoryError("Failed to get sensor events") from exc
