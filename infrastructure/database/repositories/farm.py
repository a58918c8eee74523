"""Repository for users, plantations and actuators."""

from __future__ import annotations

from typing import Iterable

from farmwatch.domain.farm import Actuator, Plantation, User
from farmwatch.enums import ActuatorStatus, PlantationMode
from infrastructure.database.ops.farm import FarmOperations


class FarmRepository:
    """Facade over the farm topology."""

    def __init__(self, backend: FarmOperations) -> None:
        self._backend = backend

    # Users --------------------------------------------------------------------
    def create_user(
        self,
        *,
        phone: str | None = None,
        email: str | None = None,
        first_name: str | None = None,
    ) -> int:
        return self._backend.insert_user(phone=phone, email=email, first_name=first_name)

    def get_user(self, user_id: int) -> User | None:
        row = self._backend.get_user_by_id(user_id)
        return User.from_row(row) if row else None

    def get_users(self, user_ids: Iterable[int]) -> list[User]:
        """Resolve recipients; unknown ids are skipped."""
        return [User.from_row(row) for row in self._backend.get_users_by_ids(user_ids)]

    # Plantations --------------------------------------------------------------
    def create_plantation(
        self,
        *,
        owner_id: int,
        name: str,
        location: str | None = None,
        crop_type: str | None = None,
        mode: PlantationMode = PlantationMode.AUTOMATIC,
    ) -> int:
        return self._backend.insert_plantation(
            owner_id=owner_id,
            name=name,
            location=location,
            crop_type=crop_type,
            mode=str(mode),
        )

    def get_plantation(self, plantation_id: int) -> Plantation | None:
        row = self._backend.get_plantation(plantation_id)
        return Plantation.from_row(row) if row else None

    def list_plantations(self) -> list[Plantation]:
        return [Plantation.from_row(row) for row in self._backend.list_plantations()]

    def set_plantation_mode(self, plantation_id: int, mode: PlantationMode) -> bool:
        return self._backend.update_plantation_mode(plantation_id, str(mode))

    # Actuators ----------------------------------------------------------------
    def create_actuator(
        self,
        *,
        plantation_id: int,
        name: str,
        actuator_type: str,
        status: ActuatorStatus = ActuatorStatus.INACTIVE,
    ) -> int:
        return self._backend.insert_actuator(
            plantation_id=plantation_id,
            name=name,
            actuator_type=actuator_type,
            status=str(status),
        )

    def get_actuator(self, actuator_id: int) -> Actuator | None:
        row = self._backend.get_actuator(actuator_id)
        return Actuator.from_row(row) if row else None

    def compare_and_set_actuator_status(
        self,
        actuator_id: int,
        expected: ActuatorStatus,
        status: ActuatorStatus,
    ) -> bool:
        """Write ``status`` only if the stored value is still ``expected``."""
        return self._backend.compare_and_set_actuator_status(actuator_id, str(expected), str(status))
