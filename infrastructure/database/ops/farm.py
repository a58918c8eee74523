"""Database operations for users, plantations and actuators."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Iterable

from farmwatch.domain.exceptions import RepositoryError
from farmwatch.utils.time import iso_now

logger = logging.getLogger(__name__)


class FarmOperations:
    """Database operations for the farm topology (owners, fields, actuators)."""

    # --- Users ---

    def insert_user(
        self,
        phone: str | None = None,
        email: str | None = None,
        first_name: str | None = None,
    ) -> int:
        """Create a user and return its id."""
        try:
            db = self.get_db()
            cur = db.execute(
                "INSERT INTO Users (phone, email, first_name, created_at) VALUES (?, ?, ?, ?)",
                (phone, email, first_name, iso_now()),
            )
            db.commit()
            return cur.lastrowid
        except sqlite3.Error as exc:
            logger.error("Failed to insert user: %s", exc)
            raise RepositoryError("Failed to insert user") from exc

    def get_user_by_id(self, user_id: int) -> dict[str, Any] | None:
        try:
            db = self.get_db()
            cur = db.execute("SELECT * FROM Users WHERE id = ?", (user_id,))
            row = cur.fetchone()
            return dict(row) if row else None
        except sqlite3.Error as exc:
            logger.error("Failed to get user %s: %s", user_id, exc)
            raise RepositoryError("Failed to get user") from exc

    def get_users_by_ids(self, user_ids: Iterable[int]) -> list[dict[str, Any]]:
        """Fetch users for the given ids; unknown ids are skipped."""
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return []
        try:
            db = self.get_db()
            placeholders = ", ".join("?" for _ in ids)
            cur = db.execute(
                f"SELECT * FROM Users WHERE id IN ({placeholders}) ORDER BY id",  # nosec B608
                ids,
            )
            return [dict(row) for row in cur.fetchall()]
        except sqlite3.Error as exc:
            logger.error("Failed to get users: %s", exc)
            raise RepositoryError("Failed to get users") from exc

    # --- Plantations ---

    def insert_plantation(
        self,
        owner_id: int,
        name: str,
        location: str | None = None,
        crop_type: str | None = None,
        mode: str = "automatic",
    ) -> int:
        try:
            db = self.get_db()
            now = iso_now()
            cur = db.execute(
                """
                INSERT INTO Plantations (owner_id, name, location, crop_type, mode, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (owner_id, name, location, crop_type, mode, now, now),
            )
            db.commit()
            return cur.lastrowid
        except sqlite3.Error as exc:
            logger.error("Failed to insert plantation: %s", exc)
            raise RepositoryError("Failed to insert plantation") from exc

    def get_plantation(self, plantation_id: int) -> dict[str, Any] | None:
        try:
            db = self.get_db()
            cur = db.execute("SELECT * FROM Plantations WHERE plantation_id = ?", (plantation_id,))
            row = cur.fetchone()
            return dict(row) if row else None
        except sqlite3.Error as exc:
            logger.error("Failed to get plantation %s: %s", plantation_id, exc)
            raise RepositoryError("Failed to get plantation") from exc

    def list_plantations(self) -> list[dict[str, Any]]:
        try:
            db = self.get_db()
            cur = db.execute("SELECT * FROM Plantations ORDER BY plantation_id")
            return [dict(row) for row in cur.fetchall()]
        except sqlite3.Error as exc:
            logger.error("Failed to list plantations: %s", exc)
            raise RepositoryError("Failed to list plantations") from exc

    def update_plantation_mode(self, plantation_id: int, mode: str) -> bool:
        """Set the control mode. Returns False when the plantation does not exist."""
        try:
            db = self.get_db()
            cur = db.execute(
                "UPDATE Plantations SET mode = ?, updated_at = ? WHERE plantation_id = ?",
                (mode, iso_now(), plantation_id),
            )
            db.commit()
            return cur.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("Failed to update plantation mode: %s", exc)
            raise RepositoryError("Failed to update plantation mode") from exc

    # --- Actuators ---

    def insert_actuator(
        self,
        plantation_id: int,
        name: str,
        actuator_type: str,
        status: str = "inactive",
    ) -> int:
        try:
            db = self.get_db()
            now = iso_now()
            cur = db.execute(
                """
                INSERT INTO Actuator (plantation_id, name, actuator_type, status, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (plantation_id, name, actuator_type, status, now, now),
            )
            db.commit()
            return cur.lastrowid
        except sqlite3.Error as exc:
            logger.error("Failed to insert actuator: %s", exc)
            raise RepositoryError("Failed to insert actuator") from exc

    def get_actuator(self, actuator_id: int) -> dict[str, Any] | None:
        try:
            db = self.get_db()
            cur = db.execute("SELECT * FROM Actuator WHERE actuator_id = ?", (actuator_id,))
            row = cur.fetchone()
            return dict(row) if row else None
        except sqlite3.Error as exc:
            logger.error("Failed to get actuator %s: %s", actuator_id, exc)
            raise RepositoryError("Failed to get actuator") from exc

    def compare_and_set_actuator_status(self, actuator_id: int, expected: str, status: str) -> bool:
        """Write ``status`` only if the stored status still equals ``expected``."""
        try:
            db = self.get_db()
            cur = db.execute(
                "UPDATE Actuator SET status = ?, updated_at = ? WHERE actuator_id = ? AND status = ?",
                (status, iso_now(), actuator_id, expected),
            )
            db.commit()
            return cur.rowcount > 0
        except sqlite3.Error as exc:
            logger.error("Failed to update actuator status: %s", exc)
            raise RepositoryError("Failed to update actuator status") from exc
