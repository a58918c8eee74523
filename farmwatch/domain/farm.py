"""
Farm Domain Objects
===================

Users, the plantations they own and the actuators installed on them.
Only the fields the notification pipeline reads are modelled.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from farmwatch.enums import ActuatorStatus, PlantationMode


@dataclass
class User:
    """Notification recipient."""

    id: int
    phone: str | None = None
    email: str | None = None
    first_name: str | None = None

    @property
    def has_phone(self) -> bool:
        return bool(self.phone and self.phone.strip())

    @property
    def display_name(self) -> str:
        return self.first_name or self.phone or self.email or f"#{self.id}"

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "User":
        return cls(
            id=row["id"],
            phone=row.get("phone"),
            email=row.get("email"),
            first_name=row.get("first_name"),
        )


@dataclass
class Plantation:
    """A field owned by a farmer."""

    id: int
    name: str
    owner_id: int | None
    mode: PlantationMode = PlantationMode.AUTOMATIC
    location: str | None = None
    crop_type: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Plantation":
        return cls(
            id=row["plantation_id"],
            name=row.get("name") or "",
            owner_id=row.get("owner_id"),
            mode=PlantationMode(row.get("mode") or PlantationMode.AUTOMATIC),
            location=row.get("location"),
            crop_type=row.get("crop_type"),
        )


@dataclass
class Actuator:
    """Pump, fan or any other switchable device of a plantation."""

    id: int
    plantation_id: int
    name: str
    actuator_type: str
    status: ActuatorStatus = ActuatorStatus.INACTIVE

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Actuator":
        return cls(
            id=row["actuator_id"],
            plantation_id=row["plantation_id"],
            name=row["name"],
            actuator_type=row["actuator_type"],
            status=ActuatorStatus(row.get("status") or ActuatorStatus.INACTIVE),
        )
