"""
Farm Activity Descriptions
==========================

French texts for events raised by owner actions: threshold edits, actuator
switches and control-mode changes.
"""

from __future__ import annotations

from farmwatch.domain.farm import Actuator, Plantation
from farmwatch.domain.sensors import Sensor
from farmwatch.domain.threshold_policy import format_number
from farmwatch.enums import ActuatorStatus, PlantationMode

MODE_LABELS = {
    PlantationMode.AUTOMATIC: "automatique",
    PlantationMode.MANUAL: "manuel",
}


def _bound(value: float | None) -> str:
    return "non défini" if value is None else format_number(value)


def _field(plantation_name: str | None) -> str:
    return f' du champ "{plantation_name}"' if plantation_name else ""


def describe_threshold_change(sensor: Sensor, plantation_name: str | None = None) -> str:
    return (
        f"Les seuils du capteur {sensor.sensor_type.value}{_field(plantation_name)} ont été modifiés : "
        f"minimum {_bound(sensor.min_threshold)}, maximum {_bound(sensor.max_threshold)}"
    )


def describe_actuator_change(
    actuator: Actuator,
    status: ActuatorStatus,
    plantation_name: str | None = None,
) -> str:
    verb = "activé" if status == ActuatorStatus.ACTIVE else "désactivé"
    return f'L\'actionneur "{actuator.name}"{_field(plantation_name)} a été {verb}'


def describe_mode_change(plantation: Plantation, previous: PlantationMode, mode: PlantationMode) -> str:
    return (
        f'Le mode de contrôle du champ "{plantation.name}" a été changé '
        f"de {MODE_LABELS[previous]} à {MODE_LABELS[mode]}"
    )
