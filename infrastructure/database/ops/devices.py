"""Database operations for sensors and their readings."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any

from farmwatch.domain.exceptions import RepositoryError
from farmwatch.utils.time import iso_now

logger = logging.getLogger(__name__)


class DeviceOperations:
    """Database operations for sensors and sensor readings."""

    # --- Sensors ---

    def insert_sensor(
        self,
        plantation_id: int,
        sensor_type: str,
        status: str = "active",
        min_threshold: float | None = None,
        max_threshold: float | None = None,
    ) -> int:
        try:
            db = self.get_db()
            now = iso_now()
            cur = db.execute(
                """
                INSERT INTO Sensor (
                    plantation_id, sensor_type, status, min_threshold, max_threshold,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (plantation_id, sensor_type, status, min_threshold, max_threshold, now, now),
            )
            db.commit()
            return cur.lastrowid
        except sqlite3.Error as exc:
            logger.error("Failed to insert sensor: %s", exc)
            raise RepositoryError("Failed to insert sensor") from exc

    def get_sensor(self, sensor_id: int) -> dict[str, Any] | None:
        try:
            db = self.get_db()
            cur = db.execute("SELECT * FROM Sensor WHERE sensor_id = ?", (sensor_id,))
            row = cur.fetchone()
            return dict(row) if row else None
        except sqlite3.Error as exc:
            logger.error("Failed to get sensor %s: %s", sensor_id, exc)
            raise RepositoryError("Failed to get sensor") from exc

    def get_sensors_by_plantation(self, plantation_id: int) -> list[dict[str, Any]]:
        try:
            db = self.get_db()
            cur = db.execute(
                "SELECT * FROM Sensor WHERE plantation_id = ? ORDER BY sensor_id",
                (plantation_id,),
            )
            return [dict(row) for row in cur.fetchall()]
        except sqlite3.Error as exc:
            logger.error("Failed to list sensors for plantation %s: %s", plantation_id, exc)
            raise RepositoryError("Failed to list sensors") from exc

    def update_sensor_thresholds(
        self,
        sensor_id: int,
        min_threshold: float | None,
        max_threshold: float | None,
    ) -> bool:
        """Write both threshold columns; status is left untouched."""
        try:
            db = self.get_db()
            cur = db.execute(
                "UPDATE Sensor SET min_threshold = ?, max_threshold = ?, updated_at = ? WHERE sensor_id = ?",
                (min_threshold, max_threshold, iso_now(), sensor_id),
            )
            db.commit()
            return cur.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("Failed to update sensor thresholds: %s", exc)
            raise RepositoryError("Failed to update sensor thresholds") from exc

    def compare_and_set_sensor_status(self, sensor_id: int, expected: str, status: str) -> bool:
        """Write ``status`` only if the stored status still equals ``expected``."""
        try:
            db = self.get_db()
            cur = db.execute(
                "UPDATE Sensor SET status = ?, updated_at = ? WHERE sensor_id = ? AND status = ?",
                (status, iso_now(), sensor_id, expected),
            )
            db.commit()
            return cur.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("Failed to update sensor status: %s", exc)
            raise RepositoryError("Failed to update sensor status") from exc

    # --- Readings ---

    def insert_sensor_reading(self, sensor_id: int, value: float, timestamp: str) -> int:
        try:
            db = self.get_db()
            cur = db.execute(
                "INSERT INTO SensorReading (sensor_id, value, timestamp) VALUES (?, ?, ?)",
                (sensor_id, value, timestamp),
            )
            db.commit()
            return cur.lastrowid
        except sqlite3.Error as exc:
            logger.error("Failed to insert sensor reading: %s", exc)
            raise RepositoryError("Failed to insert sensor reading") from exc

    def get_latest_sensor_reading(self, sensor_id: int) -> dict[str, Any] | None:
        try:
            db = self.get_db()
            cur = db.execute(
                "SELECT * FROM SensorReading WHERE sensor_id = ? ORDER BY timestamp DESC, reading_id DESC LIMIT 1",
                (sensor_id,),
            )
            row = cur.fetchone()
            return dict(row) if row else None
        except sqlite3.Error as exc:
            logger.error("Failed to get latest reading for sensor %s: %s", sensor_id, exc)
            raise RepositoryError("Failed to get latest reading") from exc
