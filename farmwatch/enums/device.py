"""
Device-related Enumerations
============================

This module contains all enums related to plantations and their devices
(sensors and actuators).
"""

from enum import Enum


class SensorType(str, Enum):
    """
    Physical measurement kinds.

    Values are the identifiers stored on the sensor row and rendered in
    event descriptions (e.g. ``soilMoisture``).
    """

    TEMPERATURE = "temperature"
    SOIL_MOISTURE = "soilMoisture"
    CO2_LEVEL = "co2Level"
    WATER_LEVEL = "waterLevel"
    LUMINOSITY = "luminosity"

    @classmethod
    def _missing_(cls, value: object) -> "SensorType | None":
        """Accept snake_case spellings of the stored identifiers."""
        if not isinstance(value, str):
            return None
        aliases = {
            "soil_moisture": cls.SOIL_MOISTURE,
            "co2": cls.CO2_LEVEL,
            "co2_level": cls.CO2_LEVEL,
            "water_level": cls.WATER_LEVEL,
        }
        return aliases.get(value.lower())

    def __str__(self) -> str:
        return self.value


class SensorStatus(str, Enum):
    """Sensor liveness status."""

    ACTIVE = "active"
    INACTIVE = "inactive"

    def __str__(self) -> str:
        return self.value


class ActuatorStatus(str, Enum):
    """Actuator on/off state."""

    ACTIVE = "active"
    INACTIVE = "inactive"

    def __str__(self) -> str:
        return self.value


class PlantationMode(str, Enum):
    """Plantation control mode."""

    AUTOMATIC = "automatic"
    MANUAL = "manual"

    def __str__(self) -> str:
        return self.value
